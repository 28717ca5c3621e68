from setuptools import find_packages, setup

setup(
    name="patterin",
    version="0.1.0",
    description="Polygon topology and editing engine with SVG output",
    packages=find_packages(include=["patterin", "patterin.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "svgelements>=1.9.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
