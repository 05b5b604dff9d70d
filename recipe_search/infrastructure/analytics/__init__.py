from .logging_sink import LoggingInstrumentationSink
from .mongo_sink import MongoInstrumentationSink

__all__ = ['LoggingInstrumentationSink', 'MongoInstrumentationSink']
