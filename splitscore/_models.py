"""
_models.py
==========
Time-reversible substitution models.

Every model is stored as the eigen-decomposition of its symmetrised rate
matrix

    M = Pi^(1/2) Q Pi^(-1/2) = V diag(lambda) V'

so that the transition matrix for branch length t is

    P(t) = Pi^(-1/2) V diag(exp(lambda t)) V' Pi^(1/2)

Rate heterogeneity
------------------
gamma > 0   gamma-distributed rates with shape ``gamma``; exp(lambda t) is
            replaced by the moment generating function (1 - lambda t/gamma)^-gamma.
pinv > 0    a proportion of invariable sites:  P <- (1 - pinv) P + pinv I.

Neither changes the stationary distribution, so rows of P(t) sum to one and
X(t) = diag(Pi) P(t) is a joint distribution for every t.

Models
------
  JCModel, F81Model, K2PModel, HKY85Model, F84Model, K3STModel, GTRModel
  ProteinModel (empirical, built by ``protein_model(name)``)

Nucleotide states are ordered a, c, g, t; transitions are a<->g and c<->t.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from splitscore._exceptions import ModelError
from splitscore import _protein_data


logger = logging.getLogger(__name__)


DETAILED_BALANCE_TOL = 1e-6

# Index pairs in acgt order
TRANSITIONS = ((0, 2), (1, 3))
TRANSVERSIONS_AC_GT = ((0, 1), (2, 3))
TRANSVERSIONS_AT_CG = ((0, 3), (1, 2))


# ============================================================================ #
# Base class                                                                   #
# ============================================================================ #


class SubstitutionModel:
    """
    Common machinery of all eigen-decomposed models.

    Subclasses set ``self.freqs``, ``self.evals`` and ``self.evecs`` (columns
    are eigenvectors of the symmetrised rate matrix) and call ``_init()``.
    """

    n_states = 0

    def __init__(self) -> None:
        self.freqs = np.zeros(0)
        self.evals = np.zeros(0)
        self.evecs = np.zeros((0, 0))
        self._sqrtf = np.zeros(0)
        self._pinv = 0.0
        self._gamma = 0.0
        self._tval: Optional[float] = None
        self._pmatrix: Optional[np.ndarray] = None

    def _init(self) -> None:
        self.freqs = np.asarray(self.freqs, dtype=np.float64)
        self._sqrtf = np.sqrt(self.freqs)
        self._tval = None
        self._pmatrix = None

    # ── Rate heterogeneity ───────────────────────────────────────────────

    @property
    def pinv(self) -> float:
        return self._pinv

    @pinv.setter
    def pinv(self, value: float) -> None:
        if value != self._pinv:
            self._pinv = float(value)
            self._tval = None

    @property
    def gamma(self) -> float:
        return self._gamma

    @gamma.setter
    def gamma(self, value: float) -> None:
        if value != self._gamma:
            self._gamma = float(value)
            self._tval = None

    @property
    def rate(self) -> float:
        """Expected substitution rate relative to the variable sites."""
        return 1.0 - self._pinv

    @property
    def is_group_based(self) -> bool:
        return False

    # ── Transition probabilities ─────────────────────────────────────────

    def frequency(self, i: int) -> float:
        return float(self.freqs[i])

    def _compute_p(self, t: float) -> np.ndarray:
        if self._gamma > 0:
            exp_d = np.power(1.0 - self.evals * t / self._gamma, -self._gamma)
        else:
            exp_d = np.exp(self.evals * t)
        x = (self.evecs * exp_d) @ self.evecs.T
        p = x * np.outer(1.0 / self._sqrtf, self._sqrtf)
        if self._pinv != 0.0:
            p = p * (1.0 - self._pinv)
            p[np.diag_indices_from(p)] += self._pinv
        return p

    def transition_matrix(self, t: float) -> np.ndarray:
        """P(t); the most recent t is cached."""
        if self._tval is None or t != self._tval:
            self._pmatrix = self._compute_p(t)
            self._tval = t
        return self._pmatrix

    def joint_matrix(self, t: float) -> np.ndarray:
        """X(t) with X_ij = pi_i P_ij(t)."""
        return self.freqs[:, None] * self.transition_matrix(t)

    def transition_probability(self, i: int, j: int, t: float) -> float:
        return float(self.transition_matrix(t)[i, j])

    def joint_probability(self, i: int, j: int, t: float) -> float:
        """X(i, j, t): probability of observing i and j at the ends of a branch."""
        return float(self.freqs[i] * self.transition_matrix(t)[i, j])

    def rate_matrix(self) -> np.ndarray:
        """Q reconstructed from the eigen-decomposition."""
        x = (self.evecs * self.evals) @ self.evecs.T
        return x * np.outer(1.0 / self._sqrtf, self._sqrtf)

    # ── Simulation ───────────────────────────────────────────────────────

    def random_state(self, rng: np.random.Generator) -> int:
        """Draw a state from the stationary distribution."""
        return int(rng.choice(self.n_states, p=self.freqs / self.freqs.sum()))

    def random_end_state(self, start: int, t: float, rng: np.random.Generator) -> int:
        """Draw the state at the end of a branch of length t starting in ``start``."""
        row = np.clip(self.transition_matrix(t)[start], 0.0, None)
        return int(rng.choice(self.n_states, p=row / row.sum()))


# ============================================================================ #
# Nucleotide models                                                            #
# ============================================================================ #


class NucleotideModel(SubstitutionModel):
    """
    General time-reversible 4-state model built from a rate matrix.

    Parameters
    ----------
    Q : array_like (4, 4), optional
        Rate matrix; the diagonal is ignored and recomputed.
    freqs : array_like (4,), optional
        Stationary frequencies.  Default uniform.
    """

    n_states = 4

    def __init__(self, Q=None, freqs: Optional[Sequence[float]] = None) -> None:
        super().__init__()
        self.Q = np.zeros((4, 4))
        if Q is not None:
            self.set_rate_matrix(Q, freqs if freqs is not None else [0.25] * 4)

    def set_rate_matrix(self, Q, freqs: Sequence[float]) -> None:
        """
        Install a rate matrix and decompose it.

        Raises
        ------
        ModelError
            If the frequencies are not 4 positive numbers, or Q violates
            detailed balance (pi_i Q_ij != pi_j Q_ji).
        """
        Q = np.array(Q, dtype=np.float64)
        f = np.asarray(freqs, dtype=np.float64)
        if Q.shape != (4, 4):
            raise ModelError(f"Rate matrix must be 4x4, got shape {Q.shape}")
        if f.shape != (4,) or np.any(f <= 0):
            raise ModelError("Nucleotide models need 4 positive base frequencies")
        f = f / f.sum()

        np.fill_diagonal(Q, 0.0)
        flux = f[:, None] * Q
        if np.max(np.abs(flux - flux.T)) > DETAILED_BALANCE_TOL:
            raise ModelError(
                "Rate matrix is not time reversible",
                suggestion="Use Q_ij = R_ij * pi_j with a symmetric R.",
            )
        np.fill_diagonal(Q, -Q.sum(axis=1))

        sqrtf = np.sqrt(f)
        M = Q * np.outer(sqrtf, 1.0 / sqrtf)
        M = 0.5 * (M + M.T)
        evals, evecs = np.linalg.eigh(M)

        self.Q = Q
        self.freqs = f
        self.evals = evals
        self.evecs = evecs
        self._init()

    def normalise(self) -> None:
        """Rescale Q so that the expected number of substitutions per unit time is 1."""
        r = -float(np.dot(self.freqs, np.diag(self.Q)))
        if r <= 0:
            raise ModelError("Rate matrix has no substitutions")
        self.Q = self.Q / r
        self.evals = self.evals / r
        self._tval = None


def _rate_matrix(exchange: np.ndarray, freqs: np.ndarray) -> np.ndarray:
    """Q_ij = R_ij pi_j for a symmetric exchangeability matrix R."""
    return exchange * freqs[None, :]


def _exchangeabilities(transition: float, ac_gt: float, at_cg: float) -> np.ndarray:
    R = np.zeros((4, 4))
    for rate, pairs in (
        (transition, TRANSITIONS),
        (ac_gt, TRANSVERSIONS_AC_GT),
        (at_cg, TRANSVERSIONS_AT_CG),
    ):
        for i, j in pairs:
            R[i, j] = R[j, i] = rate
    return R


class JCModel(NucleotideModel):
    """Jukes-Cantor: equal frequencies, equal rates."""

    def __init__(self) -> None:
        super().__init__()
        f = np.full(4, 0.25)
        self.set_rate_matrix(_rate_matrix(_exchangeabilities(1.0, 1.0, 1.0), f), f)
        self.normalise()


class F81Model(NucleotideModel):
    """Felsenstein 1981: unequal frequencies, equal exchangeabilities."""

    def __init__(self, freqs: Sequence[float]) -> None:
        super().__init__()
        f = np.asarray(freqs, dtype=np.float64)
        f = f / f.sum()
        self.set_rate_matrix(_rate_matrix(_exchangeabilities(1.0, 1.0, 1.0), f), f)
        self.normalise()


class K2PModel(NucleotideModel):
    """
    Kimura 2-parameter model.

    ``tratio`` is the expected transition/transversion ratio; with equal
    frequencies the transition rate is kappa = 2 * tratio.
    """

    def __init__(self, tratio: float = 2.0) -> None:
        super().__init__()
        self.tratio = tratio
        f = np.full(4, 0.25)
        kappa = 2.0 * tratio
        self.set_rate_matrix(_rate_matrix(_exchangeabilities(kappa, 1.0, 1.0), f), f)
        self.normalise()


class HKY85Model(NucleotideModel):
    """Hasegawa-Kishino-Yano 1985: F81 frequencies with a transition bias."""

    def __init__(self, freqs: Sequence[float], tratio: float = 2.0) -> None:
        super().__init__()
        f = np.asarray(freqs, dtype=np.float64)
        f = f / f.sum()
        pi_r = f[0] + f[2]
        pi_y = f[1] + f[3]
        kappa = tratio * pi_r * pi_y / (f[0] * f[2] + f[1] * f[3])
        self.tratio = tratio
        self.kappa = kappa
        self.set_rate_matrix(_rate_matrix(_exchangeabilities(kappa, 1.0, 1.0), f), f)
        self.normalise()


class F84Model(NucleotideModel):
    """
    Felsenstein 1984 (DNAML) model.

    Transitions within purines get the extra rate K / pi_R, within
    pyrimidines K / pi_Y.  K is derived from ``tratio`` as in PHYLIP's
    dnadist; a ratio too small for the frequencies is clamped to K = 0 (F81).
    """

    def __init__(self, freqs: Sequence[float], tratio: float = 2.0) -> None:
        super().__init__()
        f = np.asarray(freqs, dtype=np.float64)
        f = f / f.sum()
        pi_a, pi_c, pi_g, pi_t = f
        pi_r = pi_a + pi_g
        pi_y = pi_c + pi_t
        k = (tratio * pi_r * pi_y - (pi_a * pi_g + pi_c * pi_t)) / (
            pi_a * pi_g / pi_r + pi_c * pi_t / pi_y
        )
        if k < 0:
            logger.warning(
                "Transition ratio %.3f is below the F81 value for these base "
                "frequencies; using K = 0",
                tratio,
            )
            k = 0.0
        self.tratio = tratio
        self.K = k

        R = _exchangeabilities(1.0, 1.0, 1.0)
        R[0, 2] = R[2, 0] = 1.0 + k / pi_r
        R[1, 3] = R[3, 1] = 1.0 + k / pi_y
        self.set_rate_matrix(_rate_matrix(R, f), f)
        self.normalise()


class K3STModel(NucleotideModel):
    """
    Kimura 3-substitution-type model (equal frequencies).

    a<->t and c<->g transversions have rate 1, a<->c and g<->t have rate
    ``ac_vs_at`` and transitions ``tratio * (1 + ac_vs_at)``.
    """

    def __init__(self, tratio: float = 2.0, ac_vs_at: float = 2.0) -> None:
        super().__init__()
        self.tratio = tratio
        self.ac_vs_at = ac_vs_at
        f = np.full(4, 0.25)
        R = _exchangeabilities(tratio * (1.0 + ac_vs_at), ac_vs_at, 1.0)
        self.set_rate_matrix(_rate_matrix(R, f), f)
        self.normalise()


class GTRModel(NucleotideModel):
    """
    General time-reversible model.

    Parameters
    ----------
    rates : array_like (4, 4)
        Exchangeabilities; only the upper triangle is read and mirrored.
    freqs : array_like (4,)
    """

    def __init__(self, rates, freqs: Sequence[float]) -> None:
        super().__init__()
        rates = np.asarray(rates, dtype=np.float64)
        if rates.shape != (4, 4):
            raise ModelError(f"GTR rates must be 4x4, got shape {rates.shape}")
        R = np.triu(rates, k=1)
        R = R + R.T
        f = np.asarray(freqs, dtype=np.float64)
        f = f / f.sum()
        self.set_rate_matrix(_rate_matrix(R, f), f)
        self.normalise()


# ============================================================================ #
# Protein models                                                               #
# ============================================================================ #


class ProteinModel(SubstitutionModel):
    """
    Empirical 20-state amino-acid model given by its eigen-decomposition.

    Parameters
    ----------
    name : str
    evals : array_like (20,)
    evecs : array_like (20, 20)
        evecs[i, k] is component i of eigenvector k.
    freqs : array_like (20,)
    """

    n_states = 20

    def __init__(self, name: str, evals, evecs, freqs) -> None:
        super().__init__()
        self.name = name
        self.evals = np.asarray(evals, dtype=np.float64)
        self.evecs = np.asarray(evecs, dtype=np.float64)
        self.freqs = np.asarray(freqs, dtype=np.float64)
        if self.evals.shape != (20,) or self.evecs.shape != (20, 20) or self.freqs.shape != (20,):
            raise ModelError(f"Protein model {name} needs 20 states")
        self._init()


_PROTEIN_TABLES = {
    "JTT": (
        _protein_data.JTT_EIGENVALUES,
        _protein_data.JTT_EIGENVECTORS,
        _protein_data.JTT_FREQUENCIES,
    ),
    "pmb": (
        _protein_data.PMB_EIGENVALUES,
        _protein_data.PMB_EIGENVECTORS,
        _protein_data.PMB_FREQUENCIES,
    ),
    "cpREV45": (
        _protein_data.CPREV45_EIGENVALUES,
        _protein_data.CPREV45_EIGENVECTORS,
        _protein_data.CPREV45_FREQUENCIES,
    ),
}

PROTEIN_MODELS = ("cpREV45", "Dayhoff", "JTT", "mtMAM", "mtREV24", "pmb", "Rhodopsin", "WAG")


def protein_model(name: str) -> ProteinModel:
    """
    Build an empirical protein model by name.

    Raises
    ------
    ModelError
        For names without bundled rate data or unknown names.
    """
    if name not in _PROTEIN_TABLES:
        if name in PROTEIN_MODELS:
            raise ModelError(
                f"No rate data available for protein model {name!r}",
                suggestion=f"Use one of: {', '.join(sorted(_PROTEIN_TABLES))}",
            )
        raise ModelError(f"Unknown protein model: {name!r}")
    evals, evecs, freqs = _PROTEIN_TABLES[name]
    return ProteinModel(name, evals, evecs, freqs)


def nucleotide_model(config) -> NucleotideModel:
    """
    Build the nucleotide model named by a ``NucleotideDistanceConfig`` and
    apply its rate-heterogeneity settings.
    """
    name = config.model
    if name == "jc":
        model = JCModel()
    elif name == "k2p":
        model = K2PModel(config.tratio)
    elif name == "k3st":
        model = K3STModel(config.tratio, config.ac_vs_at)
    elif name == "f81":
        model = F81Model(config.base_freqs)
    elif name == "f84":
        model = F84Model(config.base_freqs, config.tratio)
    elif name == "hky85":
        model = HKY85Model(config.base_freqs, config.tratio)
    elif name == "gtr":
        model = GTRModel(config.rate_matrix, config.base_freqs)
    else:
        raise ModelError(f"Unknown nucleotide model: {name!r}")
    model.pinv = config.pinvar
    model.gamma = config.gamma
    return model
