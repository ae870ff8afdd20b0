"""Infrastructure: HTTP integrations, protocol fetchers, messaging, observability."""
