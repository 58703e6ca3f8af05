from setuptools import setup, find_packages

subpkgs = find_packages(where=".", exclude=["tests", "tests.*"])
packages = ["walkerstore"] + ["walkerstore." + p for p in subpkgs]
package_dir = {"walkerstore": "."}
for p in subpkgs:
    package_dir["walkerstore." + p] = p

setup(
    name="walkerstore",
    version="0.1.0",
    description="Pre-allocated chain and log-probability storage for ensemble MCMC samplers",
    python_requires=">=3.8",
    packages=packages,
    package_dir=package_dir,
    install_requires=[
        "numpy",
        "numba",
    ],
    extras_require={
        "test": ["pytest", "emcee"],
    },
)
