from pathlib import Path

from setuptools import find_packages, setup


def get_long_description() -> str:
    return Path("README.md").read_text(encoding="utf8")


setup(
    name="LogTokenizer",
    author="Equinor",
    description="A format agnostic tokenizer for single line log messages.",
    use_scm_version={"fallback_version": "0.0.0"},
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="LGPL-3.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["click", "numpy"],
    extras_require={"tests": ["hypothesis", "pytest"]},
    entry_points={
        "console_scripts": [
            "logtokenizer=_logtokenizer.cli:cli",
        ],
    },
    python_requires=">=3.8",
    platforms="any",
    classifiers=[
        "Development Status :: 1 - Planning",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Logging",
    ],
    setup_requires=["setuptools_scm"],
    include_package_data=True,
)
