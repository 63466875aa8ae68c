"""Armor scoring against weighted build archetypes."""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from vault_curator.core.entities import STAT_NAMES, ArmorStats, Item, stats_of


@dataclass(frozen=True)
class StatProfile:
    """Named weighting of the six stats for one build goal."""

    name: str
    description: str
    mobility: float
    resilience: float
    recovery: float
    discipline: float
    intellect: float
    strength: float

    def __post_init__(self) -> None:
        weights = self.weights()
        if any(w < 0 for w in weights):
            raise ValueError(f"Profile {self.name} has a negative weight")
        if sum(weights) <= 0:
            raise ValueError(f"Profile {self.name} needs a positive total weight")

    def weights(self) -> list[float]:
        return [getattr(self, name) for name in STAT_NAMES]


# Insertion order matters: ties on best profile go to the earlier entry.
STAT_PROFILES: Mapping[str, StatProfile] = MappingProxyType({
    "pvp_hunter": StatProfile(
        "PvP Hunter", "High mobility and recovery for Crucible",
        mobility=1.5, resilience=1.2, recovery=1.3, discipline=0.8, intellect=0.7, strength=0.5,
    ),
    "pvp_titan": StatProfile(
        "PvP Titan", "High resilience with recovery focus",
        mobility=0.5, resilience=1.5, recovery=1.3, discipline=0.8, intellect=0.7, strength=0.7,
    ),
    "pvp_warlock": StatProfile(
        "PvP Warlock", "Recovery focused with resilience",
        mobility=0.5, resilience=1.3, recovery=1.5, discipline=0.9, intellect=0.7, strength=0.5,
    ),
    "pve_ability": StatProfile(
        "PvE Ability Spam", "Maximum ability regeneration",
        mobility=0.3, resilience=1.0, recovery=0.8, discipline=1.5, intellect=0.5, strength=1.3,
    ),
    "pve_balanced": StatProfile(
        "PvE Balanced", "Well-rounded for general PvE",
        mobility=0.5, resilience=1.2, recovery=1.0, discipline=1.2, intellect=0.6, strength=0.8,
    ),
    "gm_nightfall": StatProfile(
        "GM Nightfall", "Survival focused with discipline",
        mobility=0.3, resilience=1.5, recovery=1.2, discipline=1.3, intellect=0.5, strength=0.5,
    ),
})


@dataclass(frozen=True)
class ScoringThresholds:
    min_total_stats: int = 60
    good_total_stats: int = 65
    excellent_total_stats: int = 68
    spike: int = 20
    super_spike: int = 26
    weak_stat: int = 6


@dataclass(frozen=True)
class StatValue:
    stat: str
    value: int


@dataclass(frozen=True)
class ArmorAnalysis:
    total_stats: int
    has_spike: bool
    has_super_spike: bool
    top_stats: tuple[StatValue, ...]
    weak_stats: tuple[StatValue, ...]
    is_well_distributed: bool


@dataclass(frozen=True)
class ArmorScore:
    total_score: int
    profile_scores: Mapping[str, float]
    best_profile: str
    best_profile_score: float
    analysis: ArmorAnalysis


@dataclass(frozen=True)
class ComparisonResult:
    winner: Optional[Item]
    reason: str
    score1: Optional[ArmorScore]
    score2: Optional[ArmorScore]


@dataclass(frozen=True)
class ArmorScorer:
    """Scores armor rolls; immutable, so one instance can be shared freely."""

    profiles: Mapping[str, StatProfile] = field(default_factory=lambda: STAT_PROFILES)
    thresholds: ScoringThresholds = field(default_factory=ScoringThresholds)

    def __post_init__(self) -> None:
        if not self.profiles:
            raise ValueError("At least one stat profile is required")
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))

    def with_profile(self, profile_id: str, profile: StatProfile) -> "ArmorScorer":
        """Return a scorer that also knows ``profile``."""
        profiles = dict(self.profiles)
        profiles[profile_id] = profile
        return ArmorScorer(profiles=profiles, thresholds=self.thresholds)

    def profile_name(self, profile_id: str) -> str:
        profile = self.profiles.get(profile_id)
        return profile.name if profile else profile_id

    def score_armor(self, item: Item) -> Optional[ArmorScore]:
        """Score an armor piece; None when the item is not scorable armor."""
        stats = stats_of(item)
        if stats is None:
            return None
        return self.score_stats(stats)

    def score_stats(self, stats: ArmorStats) -> ArmorScore:
        analysis = self.analyze_stats(stats)

        profile_scores: dict[str, float] = {}
        best_profile: Optional[str] = None
        best_profile_score = 0.0
        for profile_id, profile in self.profiles.items():
            score = profile_score(stats, profile)
            profile_scores[profile_id] = score
            if best_profile is None or score > best_profile_score:
                best_profile = profile_id
                best_profile_score = score

        return ArmorScore(
            total_score=self._total_score(stats, analysis),
            profile_scores=MappingProxyType(profile_scores),
            best_profile=best_profile,
            best_profile_score=best_profile_score,
            analysis=analysis,
        )

    def analyze_stats(self, stats: ArmorStats) -> ArmorAnalysis:
        t = self.thresholds
        named = [StatValue(stat, value) for stat, value in stats.named()]
        values = stats.values()

        # sorted() is stable, so equal stats keep canonical order
        top = sorted(named, key=lambda s: s.value, reverse=True)[:2]
        minimum, maximum = min(values), max(values)

        return ArmorAnalysis(
            total_stats=stats.total,
            has_spike=maximum >= t.spike,
            has_super_spike=maximum >= t.super_spike,
            top_stats=tuple(top),
            weak_stats=tuple(s for s in named if s.value <= t.weak_stat),
            is_well_distributed=minimum >= 6 and maximum - minimum <= 15,
        )

    def _total_score(self, stats: ArmorStats, analysis: ArmorAnalysis) -> int:
        t = self.thresholds
        score = 0.0

        if stats.total >= t.excellent_total_stats:
            score += 40
        elif stats.total >= t.good_total_stats:
            score += 30
        elif stats.total >= t.min_total_stats:
            score += 20
        else:
            score += max(0.0, stats.total / t.min_total_stats * 20)

        if analysis.has_super_spike:
            score += 30
        elif analysis.has_spike:
            score += 20

        if analysis.is_well_distributed:
            score += 15

        score -= min(len(analysis.weak_stats) * 5, 15)

        top_sum = sum(s.value for s in analysis.top_stats)
        if top_sum >= 45:
            score += 15
        elif top_sum >= 40:
            score += 10
        elif top_sum >= 35:
            score += 5

        return max(0, min(100, _round_half_up(score)))

    def compare_armor(self, item1: Item, item2: Item) -> ComparisonResult:
        """Decide which of two armor pieces is better, if either."""
        score1 = self.score_armor(item1)
        score2 = self.score_armor(item2)

        if score1 is None and score2 is None:
            return ComparisonResult(None, "Neither item has stats", score1, score2)
        if score1 is None:
            return ComparisonResult(item2, "First item has no stats", score1, score2)
        if score2 is None:
            return ComparisonResult(item1, "Second item has no stats", score1, score2)

        diff = score1.total_score - score2.total_score
        if abs(diff) < 5:
            best1, best2 = score1.best_profile_score, score2.best_profile_score
            if best1 > best2 + 2:
                return ComparisonResult(
                    item1, f"Better for {score1.best_profile} builds ({best1} vs {best2})",
                    score1, score2,
                )
            if best2 > best1 + 2:
                return ComparisonResult(
                    item2, f"Better for {score2.best_profile} builds ({best2} vs {best1})",
                    score1, score2,
                )
            return ComparisonResult(
                None, f"Too close to call ({score1.total_score} vs {score2.total_score})",
                score1, score2,
            )

        winner, high, low = (item1, score1, score2) if diff > 0 else (item2, score2, score1)
        return ComparisonResult(
            winner, f"Higher overall score ({high.total_score} vs {low.total_score})",
            score1, score2,
        )


def profile_score(stats: ArmorStats, profile: StatProfile) -> float:
    """Weighted average of the stats, rounded to one decimal."""
    weights = profile.weights()
    weighted = sum(v * w for v, w in zip(stats.values(), weights))
    return _round_half_up(weighted / sum(weights) * 10) / 10


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; scores round .5 upwards
    return math.floor(value + 0.5)


DEFAULT_SCORER = ArmorScorer()


def score_armor(item: Item) -> Optional[ArmorScore]:
    return DEFAULT_SCORER.score_armor(item)


def compare_armor(item1: Item, item2: Item) -> ComparisonResult:
    return DEFAULT_SCORER.compare_armor(item1, item2)
