"""Turn go test event streams into test verdicts and issue reports."""

__version__ = '0.3'
