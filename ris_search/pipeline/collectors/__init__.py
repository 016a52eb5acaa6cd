"""Collectors for remote legal-information services.

- ris_collector: RIS OGD API v2.6 (search + document content)
"""
