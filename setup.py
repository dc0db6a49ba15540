from pathlib import Path
from setuptools import setup, find_packages

README = Path(__file__).with_name("README.md").read_text(encoding="utf-8")

setup(
    name="anglebias",
    version="2025.10.dev1",  # PEP 440: YYYY.MM.devN
    description="Camera-angle bias analysis of facial blendshape intensities",
    long_description=README,
    long_description_content_type="text/markdown",
    author="ComPsy Group",
    license="CC-BY-NC-4.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "License :: Other/Proprietary License",   # CC-BY-NC: no official Trove; use this
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.8",
        "Operating System :: OS Independent",
    ],

    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_packages("src"),
    zip_safe=False,

    install_requires=[
        "scipy",
        "numpy",
        "pandas",
        "statsmodels",
        "plotly",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
