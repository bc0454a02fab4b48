import setuptools

with open("README.md") as fh:
    long_description = fh.read()

setuptools.setup(
    name="svg_picture",
    version="0.1.0",
    author="Shay Hill",
    author_email="shay_public@hotmail.com",
    description="Read SVG files into replayable display lists with Python.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/ShayHill/svg_picture",
    package_dir={"": "src"},
    package_data={"svg_picture": ["py.typed"]},
    packages=setuptools.find_packages("src"),
    install_requires=[
        "lxml",
        "svg-path-data",
        "paragraphs",
        "fonttools",
        "Pillow",
        "typing_extensions",
    ],
    extras_require={"test": ["pytest"]},
    tests_require=["pytest"],
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
