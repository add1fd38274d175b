from setuptools import setup, find_packages

setup(
    name="pointerprint",
    version="0.1.0",
    description="Print memory-mapped records as trees, following pointer fields",
    author="adamfilli",
    packages=find_packages(include=["pointerprint", "pointerprint.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
