"""Allow ``python -m event_enricher.cli`` execution."""

from event_enricher.cli.enrich import main

main()
