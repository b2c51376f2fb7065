from setuptools import setup, find_packages

with open("README.md") as f:
    readme = f.read()

with open("fabmsp/__init__.py") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split('"')[1]

setup(
    name="fabmsp",
    version=version,
    description="fabmsp - Assembling Hyperledger Fabric MSP Folders from CA Enrollments",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests",)),
    include_package_data=True,
    keywords=["fabmsp", "msp", "hyperledger", "fabric", "blockchain"],
    license="Apache License v2.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Topic :: Utilities",
        "License :: OSI Approved :: Apache Software License",
    ],
    scripts=[
        "fabmsp/cli/fabmsp",
    ],
    install_requires=[
        "PyYAML>=5.3.1",
        "prompt_toolkit>=3.0.6",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    setup_requires=["setuptools>=41.1.0"],
)
