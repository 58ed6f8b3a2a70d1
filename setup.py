from setuptools import setup

import prephylo

VERSION = prephylo.__version__

with open('README.rst') as f:
    readme = f.read()

setup(
    name="prephylo",
    version=VERSION,
    packages=["prephylo",
              "prephylo.base",
              "prephylo.process",
              "prephylo.tests"],
    package_data={"prephylo.tests": ["data/*"]},
    install_requires=[
        "numpy",
        "pandas",
        "progressbar2",
    ],
    description=("Pre-processing and concatenation of multiple sequence "
                 "alignments for phylogenetic analyses"),
    long_description=readme,
    author="Diogo N Silva",
    author_email="odiogosilva@gmail.com",
    license="GPL3",
    classifiers=["Development Status :: 4 - Beta",
                 "Intended Audience :: Science/Research",
                 "License :: OSI Approved :: GNU General Public License v3 ("
                 "GPLv3)",
                 "Natural Language :: English",
                 "Operating System :: POSIX :: Linux",
                 "Operating System :: MacOS :: MacOS X",
                 "Programming Language :: Python",
                 "Programming Language :: Python :: 3",
                 "Topic :: Scientific/Engineering :: Bio-Informatics"],
    entry_points={
        "console_scripts": [
            "PrePhylo = prephylo.PrePhylo:main"
        ]
    },
)
