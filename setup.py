from setuptools import setup, find_packages

# Read the contents of README.md
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

requirements = [
    "numpy>=1.24.0",
    "pyyaml>=6.0",
]

setup(
    name="echozero-rf",
    version="0.1.0",
    author="Echo Zero Team",
    author_email="your.email@example.com",
    description="RF signal propagation and jamming engine for electronic warfare simulation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/echozero",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "License :: Other/Proprietary License",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    include_package_data=True,
    package_data={
        "echozero": ["config/*.yaml"],
    },
    entry_points={
        "console_scripts": [
            "echozero-sim=echozero.cli.simulator:main",
        ],
    },
)
