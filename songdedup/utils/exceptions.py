"""Exception hierarchy for the duplicate detection engine.

All engine errors inherit from DedupError so callers can catch every
engine failure in a single except block:

```python
try:
    report = build_report(records, options)
except DedupError as e:
    logger.error("duplicate_scan_failed", error=str(e))
```

The engine performs no I/O, so every error here is deterministic and
reproducible given the same inputs. None of them are retryable.
"""


class DedupError(Exception):
    """Base exception for all duplicate engine errors"""

    pass


class InvalidConfigurationError(DedupError):
    """Check options are invalid

    Raised when:
    - A similarity threshold is outside [0, 1]
    - A similarity threshold is NaN

    Raised at the start of a scan, before any comparison work begins.
    """

    pass


class EmptyGroupError(DedupError, ValueError):
    """A keeper was requested for a group with no records"""

    pass


class ScanCancelledError(DedupError):
    """The caller cancelled a scan before it finished

    Partial results are discarded; nothing is returned.
    """

    pass


class RecordLoadError(DedupError):
    """Record file could not be read or parsed

    Raised when:
    - The file is not valid JSON
    - The payload is neither a list of songs nor an object with a "songs" list
    - A song entry is missing its slug/id
    """

    pass
