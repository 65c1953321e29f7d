"""Static region validation against botocore's endpoint data."""
from functools import lru_cache

from botocore.loaders import create_loader


@lru_cache(maxsize=1)
def known_regions() -> frozenset[str]:
    """All region names listed in botocore's bundled partitions."""
    endpoints = create_loader().load_data("endpoints")
    regions = set()
    for partition in endpoints.get("partitions", []):
        regions.update(partition.get("regions", {}).keys())
    return frozenset(regions)


def validate_region(region: str) -> None:
    """
    Check that `region` is a known AWS region.
    
    Raises:
        ValueError: If the region is not known
    """
    if region not in known_regions():
        raise ValueError(f"invalid AWS Region: {region}")
