"""
DUALEOS
DUALEOS: Equations of state with dual number derivatives for thermodynamic properties and phase equilibria
"""

from setuptools import find_packages, setup

if __name__ == "__main__":
    setup(
        name="dualeos",
        version="0.1.0",
        description="Equations of state with dual number derivatives for thermodynamic properties and phase equilibria",
        packages=find_packages(include=["dualeos", "dualeos.*"]),
        python_requires=">=3.7",
        install_requires=["numpy", "scipy"],
        extras_require={"test": ["pytest"]},
    )
