"""Internal constants shared across the library."""

USER_AGENT = "pysegment/0.1"
DEFAULT_REQUEST_TIMEOUT = 10.0

#: Namespace prepended to every generated event type.
EVENT_TYPE_PREFIX = "pysegment:"

#: Prefix for environment variables read by :meth:`SegmentConfig.from_env`.
ENV_PREFIX = "PYSEGMENT_"
