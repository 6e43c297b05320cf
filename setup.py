"""Install the zerbo Zeo stream decoder."""

from setuptools import setup, find_packages

setup(
    name="zerbo",
    version="0.1.0",
    description="Decoder for the Zeo sleep monitor serial protocol",
    package_dir={"": "python"},
    packages=find_packages("python"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pyserial",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["zerbo = zerbo.cli:main"],
    },
)
