import re

import setuptools

with open("pylametric/__init__.py", "r") as fh:
    version_tuple = re.search(r"^version_tuple = \((\d+), (\d+), (\d+)\)", fh.read(), re.M).groups()

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pylametric",
    version=".".join(version_tuple),
    description="Python module to push notifications to a LaMetric smart display on the local network",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["*.tests", "*.tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        'requests',
        'urllib3',
        'python-dotenv',
    ],
    extras_require={
        'image': ['Pillow>=9.1'],
        'test': ['pytest', 'Pillow>=9.1'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
