"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic so that services never receive
session-bound ORM objects.
"""

from typing import Any

from sqlalchemy import inspect

from crowdvest.domain import entities as domain
from crowdvest.database import models as orm
from crowdvest.database.polymorphic import make_ref


def feature_flag_to_domain(flag: orm.FeatureFlag) -> domain.FeatureFlag:
    return domain.FeatureFlag(
        id=flag.id,
        key=flag.key,
        name=flag.name,
        description=flag.description,
        is_active=flag.is_active,
        rollout_percentage=flag.rollout_percentage,
        created_at=flag.created_at,
    )


def sector_to_domain(sector: orm.Sector) -> domain.Sector:
    return domain.Sector(
        id=sector.id,
        name=sector.name,
        slug=sector.slug,
        slug_overridden=sector.slug_overridden,
        description=sector.description,
        is_active=sector.is_active,
        created_at=sector.created_at,
    )


def company_to_domain(company: orm.Company) -> domain.Company:
    return domain.Company(
        id=company.id,
        name=company.name,
        slug=company.slug,
        slug_overridden=company.slug_overridden,
        sector_id=company.sector_id,
        status=company.status,
        description=company.description,
        latest_valuation=company.latest_valuation,
        total_funding=company.total_funding,
        created_at=company.created_at,
    )


def referral_campaign_to_domain(campaign: orm.ReferralCampaign) -> domain.ReferralCampaign:
    return domain.ReferralCampaign(
        id=campaign.id,
        name=campaign.name,
        description=campaign.description,
        start_date=campaign.start_date,
        end_date=campaign.end_date,
        multiplier=campaign.multiplier,
        bonus_amount=campaign.bonus_amount,
        max_referrals=campaign.max_referrals,
        is_active=campaign.is_active,
        created_at=campaign.created_at,
    )


def referral_to_domain(referral: orm.Referral) -> domain.Referral:
    return domain.Referral(
        id=referral.id,
        referrer_id=referral.referrer_id,
        referred_id=referral.referred_id,
        campaign_id=referral.campaign_id,
        status=referral.status,
        completed_at=referral.completed_at,
        created_at=referral.created_at,
    )


def saga_execution_to_domain(saga: orm.SagaExecution) -> domain.SagaExecution:
    return domain.SagaExecution(
        id=saga.id,
        saga_id=saga.saga_id,
        saga_type=saga.saga_type,
        user_id=saga.user_id,
        status=saga.status,
        metadata=saga.saga_metadata,
        steps_total=saga.steps_total,
        steps_completed=saga.steps_completed,
        failure_reason=saga.failure_reason,
        failure_step=saga.failure_step,
        started_at=saga.started_at,
        completed_at=saga.completed_at,
        failed_at=saga.failed_at,
        compensated_at=saga.compensated_at,
        resolved_at=saga.resolved_at,
        resolved_by=saga.resolved_by,
        resolution_notes=saga.resolution_notes,
        created_at=saga.created_at,
    )


def saga_step_to_domain(step: orm.SagaStep) -> domain.SagaStep:
    return domain.SagaStep(
        id=step.id,
        saga_execution_id=step.saga_execution_id,
        step_number=step.step_number,
        operation=step.operation,
        status=step.status,
        result_data=step.result_data,
        executed_at=step.executed_at,
        compensation_status=step.compensation_status,
        compensation_error=step.compensation_error,
        compensated_at=step.compensated_at,
        created_at=step.created_at,
    )


def activity_log_to_domain(log: orm.ActivityLog) -> domain.ActivityLog:
    return domain.ActivityLog(
        id=log.id,
        actor_id=log.actor_id,
        action=log.action,
        target=make_ref(log.target_type, log.target_id),
        description=log.description,
        old_values=log.old_values,
        new_values=log.new_values,
        ip_address=log.ip_address,
        user_agent=log.user_agent,
        created_at=log.created_at,
    )


def company_snapshot_to_domain(snapshot: orm.CompanySnapshot) -> domain.CompanySnapshot:
    return domain.CompanySnapshot(
        id=snapshot.id,
        company_id=snapshot.company_id,
        snapshot_reason=snapshot.snapshot_reason,
        snapshot_data=snapshot.snapshot_data,
        captured_by_id=snapshot.captured_by_id,
        created_at=snapshot.created_at,
    )


def legal_agreement_to_domain(agreement: orm.LegalAgreement) -> domain.LegalAgreement:
    return domain.LegalAgreement(
        id=agreement.id,
        agreement_type=agreement.agreement_type,
        title=agreement.title,
        slug=agreement.slug,
        status=agreement.status,
        current_version=agreement.current_version,
        requires_signature=agreement.requires_signature,
    )


def agreement_signature_to_domain(
    signature: orm.UserAgreementSignature,
) -> domain.AgreementSignature:
    return domain.AgreementSignature(
        id=signature.id,
        user_id=signature.user_id,
        agreement_id=signature.agreement_id,
        agreement_version=signature.agreement_version,
        signed_at=signature.signed_at,
        ip_address=signature.ip_address,
        user_agent=signature.user_agent,
        content_hash=signature.content_hash,
        created_at=signature.created_at,
    )


def kb_article_to_domain(article: orm.KbArticle) -> domain.KbArticle:
    return domain.KbArticle(
        id=article.id,
        title=article.title,
        slug=article.slug,
        category=article.category,
        status=article.status,
        views_count=article.views_count,
        helpful_count=article.helpful_count,
        not_helpful_count=article.not_helpful_count,
        created_at=article.created_at,
    )


def article_feedback_to_domain(feedback: orm.ArticleFeedback) -> domain.ArticleFeedback:
    return domain.ArticleFeedback(
        id=feedback.id,
        article_id=feedback.article_id,
        user_id=feedback.user_id,
        is_helpful=feedback.is_helpful,
        comment=feedback.comment,
        created_at=feedback.created_at,
    )


def support_ticket_to_domain(ticket: orm.SupportTicket) -> domain.SupportTicket:
    return domain.SupportTicket(
        id=ticket.id,
        user_id=ticket.user_id,
        subject=ticket.subject,
        category=ticket.category,
        priority=ticket.priority,
        status=ticket.status,
        unread_by_user_count=ticket.unread_by_user_count,
        unread_by_admin_count=ticket.unread_by_admin_count,
        closed_at=ticket.closed_at,
        created_at=ticket.created_at,
    )


def support_message_to_domain(message: orm.SupportMessage) -> domain.SupportMessage:
    return domain.SupportMessage(
        id=message.id,
        ticket_id=message.ticket_id,
        sender_id=message.sender_id,
        sender_type=message.sender_type,
        body=message.body,
        is_read=message.is_read,
        read_at=message.read_at,
        created_at=message.created_at,
    )


def notification_to_domain(notification: orm.Notification) -> domain.Notification:
    return domain.Notification(
        id=notification.id,
        user_id=notification.user_id,
        notification_type=notification.notification_type,
        title=notification.title,
        message=notification.message,
        data=notification.data,
        action_url=notification.action_url,
        read_at=notification.read_at,
        created_at=notification.created_at,
    )


def payment_to_domain(payment: orm.Payment) -> domain.Payment:
    return domain.Payment(
        id=payment.id,
        user_id=payment.user_id,
        subscription_id=payment.subscription_id,
        amount=payment.amount,
        currency=payment.currency,
        status=payment.status,
        gateway=payment.gateway,
        gateway_order_id=payment.gateway_order_id,
        gateway_payment_id=payment.gateway_payment_id,
        failure_reason=payment.failure_reason,
        paid_at=payment.paid_at,
        created_at=payment.created_at,
    )


def bonus_transaction_to_domain(bonus: orm.BonusTransaction) -> domain.BonusTransaction:
    return domain.BonusTransaction(
        id=bonus.id,
        user_id=bonus.user_id,
        subscription_id=bonus.subscription_id,
        payment_id=bonus.payment_id,
        bonus_type=bonus.bonus_type,
        amount=bonus.amount,
        tds_deducted=bonus.tds_deducted,
        multiplier=bonus.multiplier,
        base_amount=bonus.base_amount,
        description=bonus.description,
        reversal_of_id=bonus.reversal_of_id,
        reversed_at=bonus.reversed_at,
        created_at=bonus.created_at,
    )


def campaign_to_domain(campaign: orm.Campaign) -> domain.Campaign:
    return domain.Campaign(
        id=campaign.id,
        code=campaign.code,
        title=campaign.title,
        discount_type=campaign.discount_type,
        discount_percent=campaign.discount_percent,
        discount_amount=campaign.discount_amount,
        max_discount=campaign.max_discount,
        min_amount=campaign.min_amount,
        usage_limit=campaign.usage_limit,
        usage_count=campaign.usage_count,
        per_user_limit=campaign.per_user_limit,
        starts_at=campaign.starts_at,
        ends_at=campaign.ends_at,
        is_active=campaign.is_active,
    )


def campaign_usage_to_domain(usage: orm.CampaignUsage) -> domain.CampaignUsage:
    return domain.CampaignUsage(
        id=usage.id,
        campaign_id=usage.campaign_id,
        user_id=usage.user_id,
        target=domain.TargetRef(type=usage.applicable_type, id=usage.applicable_id),
        original_amount=usage.original_amount,
        discount_applied=usage.discount_applied,
        used_at=usage.used_at,
    )


def row_to_dict(row: Any) -> dict[str, Any]:
    """Column values of any mapped row, keyed by attribute name."""
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}
