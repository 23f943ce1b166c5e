"""Curated example equations for the gallery and smoke tests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    CALCULUS = "Calculus"
    STATISTICS = "Statistics"
    PHYSICS = "Physics"
    SIGNAL_PROCESSING = "Signal Processing"
    ALGEBRA = "Algebra"
    GEOMETRY = "Geometry"
    PROBABILITY = "Probability"
    FUNDAMENTALS = "Fundamentals"


@dataclass(frozen=True)
class ExampleEquation:
    id: str
    name: str
    latex: str
    category: Category
    complexity: int  # 1 (trivial) .. 5 (dense)
    description: str = ""


EXAMPLES: list[ExampleEquation] = [
    ExampleEquation(
        "pythagorean", "Pythagorean Theorem", r"c^2 = a^2 + b^2",
        Category.GEOMETRY, 1,
        "Hypotenuse of a right triangle from its two legs.",
    ),
    ExampleEquation(
        "quadratic", "Quadratic Formula",
        r"x = \frac{-b \pm \sqrt{b^2 - 4ac}}{2a}",
        Category.ALGEBRA, 3,
        "Roots of a second-degree polynomial.",
    ),
    ExampleEquation(
        "mean", "Arithmetic Mean",
        r"\mu = \frac{1}{N} \sum_{i=1}^{N} x_i",
        Category.STATISTICS, 2,
        "Average of N samples.",
    ),
    ExampleEquation(
        "variance", "Variance",
        r"\sigma^2 = \frac{1}{N} \sum_{i=1}^{N} (x_i - \mu)^2",
        Category.STATISTICS, 3,
        "Mean squared distance from the average.",
    ),
    ExampleEquation(
        "dft", "Discrete Fourier Transform",
        r"X_k = \sum_{n=0}^{N-1} x_n e^{-2\pi i k n / N}",
        Category.SIGNAL_PROCESSING, 5,
        "Frequency content of a sampled signal.",
    ),
    ExampleEquation(
        "derivative", "Definition of the Derivative",
        r"f'(x) = \lim_{h \to 0} \frac{f(x+h) - f(x)}{h}",
        Category.CALCULUS, 4,
        "Instantaneous rate of change as a limit.",
    ),
    ExampleEquation(
        "gaussian-integral", "Gaussian Integral",
        r"I = \int_{-\infty}^{\infty} e^{-x^2} dx",
        Category.CALCULUS, 3,
        "Area under the bell curve.",
    ),
    ExampleEquation(
        "binomial", "Binomial Theorem",
        r"(a+b)^n = \sum_{k=0}^{n} \binom{n}{k} a^{n-k} b^k",
        Category.ALGEBRA, 4,
        "Expansion of a power of a sum.",
    ),
    ExampleEquation(
        "bayes", "Bayes' Theorem",
        r"P(A|B) = \frac{P(B|A) P(A)}{P(B)}",
        Category.PROBABILITY, 2,
        "Posterior from likelihood, prior and evidence.",
    ),
    ExampleEquation(
        "energy", "Mass-Energy Equivalence", r"E = m c^2",
        Category.PHYSICS, 1,
        "Rest energy of a mass.",
    ),
    ExampleEquation(
        "photon", "Photon Energy", r"E = \hbar \omega",
        Category.PHYSICS, 1,
        "Energy carried by a photon of angular frequency omega.",
    ),
    ExampleEquation(
        "factorial", "Factorial as a Product",
        r"F = \prod_{j=1}^{n} j",
        Category.FUNDAMENTALS, 2,
        "Product of the first n positive integers.",
    ),
]


def get_example(example_id: str) -> ExampleEquation | None:
    for example in EXAMPLES:
        if example.id == example_id:
            return example
    return None


def by_category(category: Category | str) -> list[ExampleEquation]:
    """Examples in ``category``, accepting the enum or its display name."""
    wanted = Category(category)
    return [e for e in EXAMPLES if e.category is wanted]
