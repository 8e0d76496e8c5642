"""Shadow benchmark: a finished report against fixed reference percentiles."""

from devsignal.analyzers.normalizer import half_up
from devsignal.analyzers.scorer import COMMIT_DISCIPLINE_STRENGTH
from devsignal.models.schemas import (
    Benchmark,
    GrowthTarget,
    PersonaDetails,
    Report,
    ShadowProfile,
)

ARCH_SCORE_FLOOR = 35
ARCH_SCORE_CEILING = 75

GROWTH_TARGETS = [
    GrowthTarget(
        title="Recursive System Design",
        desc="Introduce intentional patterns like MVC or Clean Architecture.",
    ),
    GrowthTarget(
        title="Public API Surface",
        desc="Build projects that expose documented, typed public APIs.",
    ),
    GrowthTarget(
        title="Infrastructure-as-Code",
        desc="Add Terraform or Kubernetes configurations to prove DevOps rigor.",
    ),
]

PERSONA_TRAITS = ["High Velocity", "Deep Implementation Depth", "Refinement Focused"]


def _persona(score: int) -> str:
    if score < 40:
        return "Rising Contributor"
    elif score < 70:
        return "Agile Developer"
    elif score < 85:
        return "Technical Specialist"
    return "System Architect"


def architectural_depth(report: Report) -> int:
    """Complexity signal from large, starred and multi-language original repos.

    5 per repo over 3000 KB, 8 per repo over 30 stars, 4 per distinct
    language, clamped to 35-75.
    """
    original = [r for r in report.all_repos if not r.is_fork]
    large = sum(1 for r in original if r.size > 3000)
    starred = sum(1 for r in original if r.stars > 30)
    languages = len({r.language for r in original})

    base = large * 5 + starred * 8 + languages * 4
    return min(max(base, ARCH_SCORE_FLOOR), ARCH_SCORE_CEILING)


def analyze(report: Report) -> ShadowProfile:
    """Benchmark a completed report. Reads the report, never mutates it."""
    original = [r for r in report.all_repos if not r.is_fork]
    avg_desc_length = sum(len(r.description) for r in original) / (len(original) or 1)

    arch_score = architectural_depth(report)
    convention_level = 95 if COMMIT_DISCIPLINE_STRENGTH in report.strengths else 65
    doc_score = half_up(min(avg_desc_length / 100 * 100, 100))

    benchmarks = [
        Benchmark(
            category="Architectural Depth",
            score=arch_score,
            top_tier=92,
            gap=(
                "Exhibiting Staff-level system ownership."
                if arch_score > 90
                else "Increase project complexity; add more system design patterns."
            ),
        ),
        Benchmark(
            category="Technical Signaling",
            score=convention_level,
            top_tier=95,
            gap=(
                "Signal matches Tier-1 Engineering standards."
                if convention_level > 90
                else "Adopt Conventional Commits and atomic PR patterns."
            ),
        ),
        Benchmark(
            category="Documentation Maturity",
            score=doc_score,
            top_tier=85,
            gap=(
                "Sustained high-fidelity documentation signal."
                if avg_desc_length > 80
                else "Expand project READMEs with technical specs."
            ),
        ),
    ]

    top_tech = report.tech_stack[0].name if report.tech_stack else "modern"
    details = PersonaDetails(
        desc=(
            f"An engineering profile focused on {report.role_fit.lower()} "
            f"with strong technical signaling in {top_tech} technologies."
        ),
        traits=list(PERSONA_TRAITS),
    )

    return ShadowProfile(
        benchmarks=benchmarks,
        growth_targets=[t.model_copy() for t in GROWTH_TARGETS],
        persona=_persona(report.score),
        persona_details=details,
    )
