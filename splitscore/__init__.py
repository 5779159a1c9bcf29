"""
splitscore
==========

Distances, splits and haplotype networks from aligned characters.

*splitscore* scores alignments the way SplitsTree does: model-corrected
pairwise distances with maximum-likelihood fallbacks and Bulmer variances,
split systems voted by character columns or grown by quartet parsimony,
and minimum spanning networks on condensed haplotypes.

Main Classes
------------
Characters : Read-only aligned character matrix
PairwiseCompare : Weighted state-pair frequencies of two taxa
Distances : Symmetric distance matrix with variances
Split, SplitSystem : Bipartitions of the taxa and weighted lists of them
Network : Haplotype network returned by MinSpanningNetwork

Transforms
----------
NucleotideDistance, ProteinMLDistance, HammingDistance : model distances
DiceDistance, JaccardDistance, UpholtDistance : binary-data distances
CodominantDistance, GapDistance, BaseFreqDistance : special-purpose distances
DNA2Splits, Binary2Splits, RYSplits, MedianNetworkSplits : column splits
ParsimonySplits : Bandelt-Dress parsimony splits
MinSpanningNetwork : Excoffier-Smouse minimum spanning network

Substitution Models
-------------------
JCModel, F81Model, K2PModel, HKY85Model, F84Model, K3STModel, GTRModel,
ProteinModel, protein_model

Context Managers
----------------
quiet : Suppress logging during operations
suppress_logger : Suppress specific logger
suppress_warnings : Suppress specific warnings
use_backend : Force specific computational backend
silent_benchmark : Combine quiet + backend selection + warning suppression

Backend Information
-------------------
get_available_backends : Query available computational backends
get_backend_info : Get comprehensive backend status
check_numba_available : Check if numba is available

Examples
--------
Basic usage:

>>> from splitscore import Characters, NucleotideDistance, NucleotideDistanceConfig
>>> chars = Characters(['acgtacgt', 'acgtacga', 'tcgtacga'], labels=['A', 'B', 'C'])
>>> distances = NucleotideDistance(NucleotideDistanceConfig(model='k2p')).apply(chars)
>>> distances.get(1, 2)

Splits and networks:

>>> from splitscore import DNA2Splits, MinSpanningNetwork
>>> splits = DNA2Splits().apply(chars)
>>> network = MinSpanningNetwork().apply(chars)

With context managers:

>>> from splitscore import quiet, use_backend
>>> with quiet(), use_backend('python'):
...     distances = NucleotideDistance().apply(chars)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Data
from ._characters import Characters
from ._distances import Distances
from ._split_system import Split, SplitSystem
from ._network import CondensedCharacters, Translator, Network, Node, Edge, condense

# Pairwise comparison
from ._pairwise import PairwiseCompare, bulmer_variance
from ._optimize import golden_section, brent

# Substitution models
from ._models import (
    SubstitutionModel,
    NucleotideModel,
    JCModel,
    F81Model,
    K2PModel,
    HKY85Model,
    F84Model,
    K3STModel,
    GTRModel,
    ProteinModel,
    protein_model,
    nucleotide_model,
)

# Transforms
from ._distances import (
    NucleotideDistance,
    ProteinMLDistance,
    HammingDistance,
    DiceDistance,
    JaccardDistance,
    UpholtDistance,
    CodominantDistance,
    GapDistance,
    BaseFreqDistance,
)
from ._splits import DNA2Splits, Binary2Splits, RYSplits, MedianNetworkSplits
from ._parsimony import ParsimonySplits
from ._network import MinSpanningNetwork

# Configuration
from ._config import (
    NucleotideDistanceConfig,
    ProteinDistanceConfig,
    HammingConfig,
    CodominantConfig,
    SplitsConfig,
    ParsimonySplitsConfig,
    NetworkConfig,
)

# Progress and errors
from ._progress import ProgressListener, NullProgress
from ._exceptions import (
    SplitsError,
    InvalidCharacterError,
    SaturatedDistanceError,
    CanceledError,
    NotApplicableError,
    ModelError,
)

# Context managers (user-facing utilities)
from ._context import (
    suppress_logger,
    quiet,
    suppress_warnings,
    use_backend,
    silent_benchmark,
)

# Backend information (useful for checking capabilities)
from ._backend import (
    get_available_backends,
    get_backend_info,
    check_numba_available,
)

from ._logging import (
    log_optimization_status,
    install_numba_warning_filter,
    log_backend_availability,
)

# Log system info and backend availability on package import
log_optimization_status()
log_backend_availability(get_available_backends())
install_numba_warning_filter()

# Public API
__all__ = [
    # Data
    "Characters",
    "Distances",
    "Split",
    "SplitSystem",
    "CondensedCharacters",
    "Translator",
    "Network",
    "Node",
    "Edge",
    "condense",
    # Pairwise comparison
    "PairwiseCompare",
    "bulmer_variance",
    "golden_section",
    "brent",
    # Substitution models
    "SubstitutionModel",
    "NucleotideModel",
    "JCModel",
    "F81Model",
    "K2PModel",
    "HKY85Model",
    "F84Model",
    "K3STModel",
    "GTRModel",
    "ProteinModel",
    "protein_model",
    "nucleotide_model",
    # Transforms
    "NucleotideDistance",
    "ProteinMLDistance",
    "HammingDistance",
    "DiceDistance",
    "JaccardDistance",
    "UpholtDistance",
    "CodominantDistance",
    "GapDistance",
    "BaseFreqDistance",
    "DNA2Splits",
    "Binary2Splits",
    "RYSplits",
    "MedianNetworkSplits",
    "ParsimonySplits",
    "MinSpanningNetwork",
    # Configuration
    "NucleotideDistanceConfig",
    "ProteinDistanceConfig",
    "HammingConfig",
    "CodominantConfig",
    "SplitsConfig",
    "ParsimonySplitsConfig",
    "NetworkConfig",
    # Progress and errors
    "ProgressListener",
    "NullProgress",
    "SplitsError",
    "InvalidCharacterError",
    "SaturatedDistanceError",
    "CanceledError",
    "NotApplicableError",
    "ModelError",
    # Context managers
    "suppress_logger",
    "quiet",
    "suppress_warnings",
    "use_backend",
    "silent_benchmark",
    # Backend information
    "get_available_backends",
    "get_backend_info",
    "check_numba_available",
    # Version info
    "__version__",
]
