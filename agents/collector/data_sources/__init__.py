"""
Collector Data Sources Package

Evidence source adapters for reading recent social posts.
"""

from agents.collector.data_sources.base_source import EvidenceSource
from agents.collector.data_sources.nitter_source import NitterSource
from agents.collector.data_sources.static_source import StaticEvidenceSource

__all__ = [
    "EvidenceSource",
    "NitterSource",
    "StaticEvidenceSource",
]


def get_source(source_id: str, **kwargs) -> EvidenceSource:
    """
    Get an evidence source adapter by id.

    Args:
        source_id: "nitter" or "static"
        **kwargs: Adapter constructor arguments

    Raises:
        ValueError: If no adapter is registered for source_id
    """
    adapters = {
        "nitter": NitterSource,
        "static": StaticEvidenceSource,
    }

    adapter_class = adapters.get(source_id)
    if adapter_class is None:
        raise ValueError(f"No evidence source found for source_id: {source_id}")

    return adapter_class(**kwargs)
