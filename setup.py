"""
symcalc - Setup
"""

from setuptools import setup, find_packages

setup(
    name="symcalc",
    version="1.0.0",
    description="Symbolic calculator core: simplifier, units, solver, polynomials, calendar",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest>=7.0", "sympy"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Programming Language :: Python :: 3",
    ],
)
