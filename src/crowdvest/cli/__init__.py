"""Command line interface for crowdvest."""
