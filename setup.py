# -*- coding: utf-8 -*-
from setuptools import setup, find_packages

long_description = "Dual-mode (batch and incremental) technical analysis indicators for NumPy and Pandas"

setup(
    name = "pandas_ta_dual",
    packages = find_packages(exclude=["tests", "tests.*", "scripts"]),
    version = "0.1.0a",
    description=long_description,
    long_description=long_description,
    author = "Kevin Johnson",
    author_email = "appliedmathkj@gmail.com",
    url = "https://github.com/glar1900/pandas-ta-stateful",
    maintainer="Han Sang Woo",
    maintainer_email="hsangwoo5@naver.com",
    download_url = "https://github.com/glar1900/pandas-ta-stateful.git",
    keywords = ['technical analysis', 'python3', 'pandas', 'incremental', 'streaming'],
    license="The MIT License (MIT)",
    python_requires=">=3.8",
    classifiers = [
        'Programming Language :: Python :: 3.8',
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Intended Audience :: Developers',
        'Intended Audience :: Financial and Insurance Industry',
        'Topic :: Office/Business :: Financial :: Investment',
    ],
    install_requires=['numpy', 'pandas'],

    # List additional groups of dependencies here (e.g. development dependencies).
    # You can install these using the following syntax, for example:
    # $ pip install -e .[dev,test]
    extras_require = {
        'dev': ['ta-lib', 'jupyterlab', 'pytest'],
        'test': ['pytest'],
        'talib': ['ta-lib'],
    },
)
