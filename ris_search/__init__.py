"""RIS search service.

Client layer for the Austrian RIS (Rechtsinformationssystem) OGD API:
request execution, response normalization, error classification and
direct document URL resolution.
"""

__version__ = "1.0.0"
