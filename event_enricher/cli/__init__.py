"""Command-line tools for event_enricher.

- ``python -m event_enricher.cli.enrich events.json`` -- enrich a JSON batch
  of events and print the results.
- ``python -m event_enricher.cli`` -- same as ``enrich``.
"""
