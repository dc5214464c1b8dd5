VERSION = "0.3.0"
LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"
