"""
_config.py
==========
Typed configuration for every transform.

Each algorithm takes one frozen pydantic model listing the options it
recognises.  Defaults reproduce the classic SplitsTree settings; invalid
values fail at construction with a ``pydantic.ValidationError``.

Examples
--------
>>> NucleotideDistanceConfig(model='k2p', tratio=3.0)
>>> NucleotideDistanceConfig(model='hky85').use_ml
True
>>> SplitsConfig(min_split_weight=2, label_splits=True)
"""

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


logger = logging.getLogger(__name__)


AmbiguityPolicy = Literal["ignore", "average", "match"]
Optimizer = Literal["golden", "brent"]

NucleotideModelName = Literal["jc", "k2p", "k3st", "f81", "f84", "hky85", "gtr"]
ProteinModelName = Literal[
    "cpREV45", "Dayhoff", "JTT", "mtMAM", "mtREV24", "pmb", "Rhodopsin", "WAG"
]

# Models without a closed-form correction
ML_ONLY_MODELS = ("hky85",)


def _default_rate_matrix() -> List[List[float]]:
    return [[1.0] * 4 for _ in range(4)]


class NucleotideDistanceConfig(BaseModel):
    """Options of the nucleotide distance transforms (JC ... GTR)."""

    model: NucleotideModelName = Field(
        default="jc", description="Substitution model used for the correction."
    )
    use_ml: bool = Field(
        default=False,
        description="Maximum-likelihood distance instead of the exact formula.",
    )
    optimizer: Optimizer = Field(
        default="golden", description="1-D minimiser for the ML distance."
    )
    pinvar: float = Field(
        default=0.0, ge=0.0, lt=1.0, description="Proportion of invariable sites."
    )
    gamma: float = Field(
        default=-1.0,
        description="Gamma shape parameter; values <= 0 mean equal rates.",
    )
    base_freqs: List[float] = Field(
        default_factory=lambda: [0.25, 0.25, 0.25, 0.25],
        description="Base frequencies in acgt order (normalised).",
    )
    tratio: float = Field(
        default=2.0, gt=0.0, description="Transition/transversion ratio."
    )
    ac_vs_at: float = Field(
        default=2.0,
        gt=0.0,
        description="K3ST: ratio of a<->c/g<->t to a<->t/c<->g transversions.",
    )
    rate_matrix: List[List[float]] = Field(
        default_factory=_default_rate_matrix,
        description="GTR: symmetric 4x4 exchangeabilities (diagonal ignored).",
    )
    ambiguity: AmbiguityPolicy = Field(
        default="ignore", description="Treatment of ambiguity codes."
    )

    @field_validator("base_freqs")
    @classmethod
    def normalise_base_freqs(cls, value: List[float]) -> List[float]:
        if len(value) != 4:
            raise ValueError(f"Expected 4 base frequencies, got {len(value)}")
        if any(f <= 0 for f in value):
            raise ValueError("Base frequencies must be positive")
        total = float(sum(value))
        return [f / total for f in value]

    @field_validator("rate_matrix")
    @classmethod
    def check_rate_matrix(cls, value: List[List[float]]) -> List[List[float]]:
        if len(value) != 4 or any(len(row) != 4 for row in value):
            raise ValueError("GTR rate matrix must be 4x4")
        for i in range(4):
            for j in range(i + 1, 4):
                if value[i][j] < 0 or value[j][i] < 0:
                    raise ValueError("GTR exchangeabilities must be non-negative")
        return value

    @model_validator(mode="before")
    @classmethod
    def force_ml_for_ml_only_models(cls, data):
        if isinstance(data, dict) and data.get("model") in ML_ONLY_MODELS:
            if data.get("use_ml") is False:
                logger.info(
                    "Model %s has no exact distance; using maximum likelihood",
                    data["model"],
                )
            data = dict(data, use_ml=True)
        return data

    model_config = {"frozen": True}


class ProteinDistanceConfig(BaseModel):
    """Options of the protein maximum-likelihood distance."""

    model: ProteinModelName = Field(default="JTT")
    pinvar: float = Field(default=0.0, ge=0.0, lt=1.0)
    gamma: float = Field(default=-1.0)
    optimizer: Optimizer = Field(default="golden")
    ambiguity: AmbiguityPolicy = Field(default="ignore")

    model_config = {"frozen": True}


class HammingConfig(BaseModel):
    """Options of the Hamming (p-) distance."""

    normalize: bool = Field(
        default=True,
        description="Report the proportion of differences instead of the count.",
    )
    ambiguity: AmbiguityPolicy = Field(default="ignore")

    model_config = {"frozen": True}


class CodominantConfig(BaseModel):
    """Options of the codominant genetic distance for diploid data."""

    use_square_root: bool = Field(
        default=True,
        description="Take the square root of the summed locus contributions.",
    )

    model_config = {"frozen": True}


class SplitsConfig(BaseModel):
    """Options of the majority-colour split constructors."""

    add_all_trivial: bool = Field(
        default=True, description="Complete the system with all trivial splits."
    )
    min_split_weight: float = Field(
        default=1.0,
        ge=0.0,
        description="Drop non-trivial splits with less support (filter off at <= 1).",
    )
    use_ry_alphabet: bool = Field(
        default=False, description="Collapse nucleotides to purines/pyrimidines."
    )
    label_splits: bool = Field(
        default=False, description="Label each split with its supporting positions."
    )

    model_config = {"frozen": True}


class ParsimonySplitsConfig(BaseModel):
    """Options of the parsimony splits."""

    gaps_as_missing: bool = Field(
        default=True, description="Skip sites with a gap in any quartet taxon."
    )

    model_config = {"frozen": True}


class NetworkConfig(BaseModel):
    """Options of the minimum spanning network."""

    epsilon: int = Field(
        default=0,
        ge=0,
        description="Add connections up to this much longer than the connecting threshold.",
    )
    label_edges: bool = Field(default=False)
    show_haplotypes: bool = Field(default=False)
    subdivide_edges: bool = Field(default=False)

    model_config = {"frozen": True}


def resolve_config(config: Optional[BaseModel], cls):
    """Return ``config`` or the default instance of ``cls``."""
    if config is None:
        return cls()
    if not isinstance(config, cls):
        raise TypeError(
            f"Expected {cls.__name__}, got {type(config).__name__}"
        )
    return config
