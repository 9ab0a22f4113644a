"""protoc plugin that renders documentation for compiled protobuf schemas."""

__version__ = "1.0.0"
