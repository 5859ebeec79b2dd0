import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="ancstream",
    version="0.0.1",
    description="Online LMS noise cancellation for streamed audio blocks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["ancstream", "ancstream.*"]),
    package_data={"ancstream": ["config.yaml"]},
    install_requires=[
        "numpy",
        "scipy",
        "numba",
        "pyyaml",
        "matplotlib",
        "python-json-logger",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
