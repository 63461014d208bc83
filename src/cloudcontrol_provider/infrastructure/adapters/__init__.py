"""Infrastructure adapters implementing domain ports."""

from cloudcontrol_provider.infrastructure.adapters.logging_adapter import LoggingAdapter

__all__: list[str] = ["LoggingAdapter"]
