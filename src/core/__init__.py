"""Core: domain, contracts, services and configuration."""
