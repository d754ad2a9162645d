"""
Declarative descriptions of the resources to provision and the results
returned once they exist.
"""

import random
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .exceptions import ProviderError

ACCOUNT_NAME_PATTERN = re.compile(r"^[a-z0-9]{3,24}$")
DEFAULT_ACCOUNT_PREFIX = "samplestor"


class _ValueEnum(Enum):
    @classmethod
    def from_value(cls, value):
        """Parse a user supplied value, ignoring case and underscores."""
        if isinstance(value, cls):
            return value

        wanted = str(value).replace("_", "").lower()
        for member in cls:
            if member.value.replace("_", "").lower() == wanted:
                return member

        raise ValueError(
            f"Unsupported {cls.__name__}: {value}. Supported: {[m.value for m in cls]}"
        )

    def __str__(self):
        return self.value


class Kind(_ValueEnum):
    STORAGE = "Storage"
    STORAGE_V2 = "StorageV2"
    BLOB_STORAGE = "BlobStorage"
    FILE_STORAGE = "FileStorage"
    BLOCK_BLOB_STORAGE = "BlockBlobStorage"


class SkuName(_ValueEnum):
    STANDARD_LRS = "Standard_LRS"
    STANDARD_GRS = "Standard_GRS"
    STANDARD_RAGRS = "Standard_RAGRS"
    STANDARD_ZRS = "Standard_ZRS"
    STANDARD_GZRS = "Standard_GZRS"
    STANDARD_RAGZRS = "Standard_RAGZRS"
    PREMIUM_LRS = "Premium_LRS"
    PREMIUM_ZRS = "Premium_ZRS"

    @property
    def tier(self) -> "SkuTier":
        return SkuTier.from_value(self.value.split("_", 1)[0])


class SkuTier(_ValueEnum):
    STANDARD = "Standard"
    PREMIUM = "Premium"


SUPPORTED_SKUS = {
    Kind.STORAGE_V2: frozenset(SkuName),
    Kind.STORAGE: frozenset(
        {
            SkuName.STANDARD_LRS,
            SkuName.STANDARD_GRS,
            SkuName.STANDARD_RAGRS,
            SkuName.STANDARD_ZRS,
            SkuName.PREMIUM_LRS,
        }
    ),
    Kind.BLOB_STORAGE: frozenset(
        {SkuName.STANDARD_LRS, SkuName.STANDARD_GRS, SkuName.STANDARD_RAGRS}
    ),
    Kind.FILE_STORAGE: frozenset({SkuName.PREMIUM_LRS, SkuName.PREMIUM_ZRS}),
    Kind.BLOCK_BLOB_STORAGE: frozenset({SkuName.PREMIUM_LRS, SkuName.PREMIUM_ZRS}),
}


def generate_account_name(prefix: str = DEFAULT_ACCOUNT_PREFIX, rng=None) -> str:
    """Return ``prefix`` followed by a random integer in [0, 1000)."""
    rng = rng or random
    return f"{prefix}{rng.randrange(1000)}"


def validate_account_name(name: str) -> None:
    if not ACCOUNT_NAME_PATTERN.match(name or ""):
        raise ProviderError(
            f"Storage account name '{name}' is invalid: use 3-24 lowercase letters and digits",
            step="validate storage account",
            error_code="AccountNameInvalid",
        )


def validate_sku(kind: Kind, sku_name: SkuName, sku_tier: SkuTier) -> None:
    """Reject kind/SKU/tier combinations the provider does not support."""
    if sku_name.tier is not sku_tier:
        raise ProviderError(
            f"SKU {sku_name} belongs to tier {sku_name.tier}, not {sku_tier}",
            step="validate storage account",
            error_code="InvalidSkuTier",
        )
    if sku_name not in SUPPORTED_SKUS[kind]:
        supported = sorted(s.value for s in SUPPORTED_SKUS[kind])
        raise ProviderError(
            f"SKU {sku_name} is not supported for kind {kind}. Supported: {supported}",
            step="validate storage account",
            error_code="SkuNotSupported",
        )


@dataclass(frozen=True)
class ResourceGroupSpec:
    name: str
    location: str
    tags: Dict[str, str] = field(default_factory=dict)

    def to_parameters(self) -> dict:
        return {"location": self.location, "tags": dict(self.tags)}


@dataclass(frozen=True)
class StorageAccountSpec:
    name: str
    resource_group: str
    location: str
    kind: Kind = Kind.STORAGE_V2
    sku_name: SkuName = SkuName.STANDARD_LRS
    sku_tier: Optional[SkuTier] = None
    tags: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Accept plain strings and fill in the tier from the SKU name.
        object.__setattr__(self, "kind", Kind.from_value(self.kind))
        object.__setattr__(self, "sku_name", SkuName.from_value(self.sku_name))
        tier = self.sku_tier
        tier = self.sku_name.tier if tier is None else SkuTier.from_value(tier)
        object.__setattr__(self, "sku_tier", tier)

    def validate(self) -> None:
        validate_account_name(self.name)
        validate_sku(self.kind, self.sku_name, self.sku_tier)

    def to_parameters(self) -> dict:
        return {
            "kind": self.kind.value,
            "location": self.location,
            "sku": {"name": self.sku_name.value, "tier": self.sku_tier.value},
            "tags": dict(self.tags),
        }


@dataclass(frozen=True)
class ResourceGroupResult:
    id: str
    name: str
    location: str
    provisioning_state: Optional[str] = None

    @classmethod
    def from_sdk(cls, group):
        properties = getattr(group, "properties", None)
        return cls(
            id=group.id,
            name=group.name,
            location=group.location,
            provisioning_state=getattr(properties, "provisioning_state", None),
        )


@dataclass(frozen=True)
class FinishedResource:
    """A storage account the provider reports as fully created."""

    id: str
    name: str
    location: str
    provisioning_state: Optional[str] = None
    primary_endpoints: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_sdk(cls, account):
        endpoints = {}
        sdk_endpoints = getattr(account, "primary_endpoints", None)
        if sdk_endpoints is not None:
            for key in ("blob", "queue", "table", "file", "web", "dfs"):
                url = getattr(sdk_endpoints, key, None)
                if isinstance(url, str):
                    endpoints[key] = url

        state = getattr(account, "provisioning_state", None)
        return cls(
            id=account.id,
            name=account.name,
            location=account.location,
            provisioning_state=getattr(state, "value", state),
            primary_endpoints=endpoints,
        )
