from setuptools import setup

setup(
    name="sweepframe",
    maintainer="Nick Lind",
    version="1.0",
    maintainer_email="nick@quantilegroup.com",
    description="Tidy tables from fitted time-series models and their forecasts",
    platforms="any",
    python_requires=">=3.8",
    packages=["sweepframe"],
    install_requires=["numpy", "pandas", "pytest", "statsmodels"],
    extras_require={"test": ["pytest"]},
)
