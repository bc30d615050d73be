"""
setup.py

uwp-type-mapper - builds a type map of the Windows Runtime API from its reference documentation
"""

from typing import List, Optional, Union

from setuptools import find_packages, setup

from uwp_type_mapper.__version__ import __version__


def load_requirements(file_list: Optional[Union[str, List[str]]] = None) -> List[str]:
    if file_list is None:
        file_list = ["requirements/base.in"]
    if isinstance(file_list, str):
        file_list = [file_list]
    requirements: List[str] = []
    for file in file_list:
        with open(file, encoding="utf-8") as f:
            requirements.extend(line.strip() for line in f.readlines())
    requirements = [
        req for req in requirements if req and not req.startswith("#") and not req.startswith("-")
    ]
    return requirements


setup(
    name="uwp-type-mapper",
    description="Extracts JavaScript type notations from Windows Runtime reference documents.",
    long_description=open("README.md", encoding="utf-8").read(),  # noqa: SIM115
    long_description_content_type="text/markdown",
    keywords="WinRT UWP JavaScript HTML parsing type-definitions",
    python_requires=">=3.9.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
    ],
    packages=find_packages(include=["uwp_type_mapper", "uwp_type_mapper.*"]),
    version=__version__,
    install_requires=load_requirements(),
    extras_require={
        "test": load_requirements("requirements/test.in"),
    },
    entry_points={
        "console_scripts": ["uwp-type-mapper=uwp_type_mapper.cli:main"],
    },
    package_dir={"uwp_type_mapper": "uwp_type_mapper"},
)
