"""Tests for knowledge base articles and their helpfulness counters."""

import pytest

from crowdvest.domain.errors import ConflictError, NotFoundError
from crowdvest.domain.help_center import HelpCenterService


@pytest.fixture
def help_center(temp_db):
    return HelpCenterService(temp_db)


@pytest.fixture
def article(help_center):
    article_id = help_center.create_article("How do I complete KYC?", "Upload your PAN...", category="kyc")
    return help_center.get_article(article_id)


def test_create_article(article):
    assert article.slug == "how-do-i-complete-kyc"
    assert article.views_count == 0
    assert article.helpful_count == 0
    assert article.not_helpful_count == 0


def test_duplicate_title_conflicts(help_center, article):
    with pytest.raises(ConflictError):
        help_center.create_article("How do I complete KYC", "Again")


def test_record_view(help_center, article):
    help_center.record_view(article.id)
    help_center.record_view(article.id)
    assert help_center.get_article(article.id).views_count == 2


def test_record_view_unknown_article(help_center):
    with pytest.raises(NotFoundError):
        help_center.record_view(999)


def test_rating_bumps_counter(help_center, article, users):
    help_center.rate_article(article.id, users["alice"], is_helpful=True)
    help_center.rate_article(article.id, users["bob"], is_helpful=True)
    help_center.rate_article(article.id, users["carol"], is_helpful=False, comment="Too vague")

    refreshed = help_center.get_article(article.id)
    assert refreshed.helpful_count == 2
    assert refreshed.not_helpful_count == 1


def test_user_rates_once(help_center, article, users):
    help_center.rate_article(article.id, users["alice"], is_helpful=True)
    with pytest.raises(ConflictError):
        help_center.rate_article(article.id, users["alice"], is_helpful=False)
    assert help_center.get_article(article.id).helpful_count == 1


def test_flipping_rating_moves_counters(help_center, article, users):
    feedback_id = help_center.rate_article(article.id, users["alice"], is_helpful=True)
    help_center.change_rating(feedback_id, is_helpful=False)

    refreshed = help_center.get_article(article.id)
    assert refreshed.helpful_count == 0
    assert refreshed.not_helpful_count == 1
    assert help_center.get_rating(feedback_id).is_helpful is False


def test_changing_only_comment_keeps_counters(help_center, article, users):
    feedback_id = help_center.rate_article(article.id, users["alice"], is_helpful=True)
    help_center.change_rating(feedback_id, is_helpful=True, comment="Clear steps")

    refreshed = help_center.get_article(article.id)
    assert refreshed.helpful_count == 1
    assert refreshed.not_helpful_count == 0
    assert help_center.get_rating(feedback_id).comment == "Clear steps"


def test_deleting_rating_decrements(help_center, article, users):
    feedback_id = help_center.rate_article(article.id, users["alice"], is_helpful=False)
    help_center.delete_rating(feedback_id)

    assert help_center.get_article(article.id).not_helpful_count == 0
    assert help_center.get_rating(feedback_id) is None
    with pytest.raises(NotFoundError):
        help_center.delete_rating(feedback_id)


def test_rating_unknown_article(help_center, users):
    with pytest.raises(NotFoundError):
        help_center.rate_article(12345, users["alice"], is_helpful=True)
