# Copyright (c) 2019 Riverbed Technology, Inc.
#
# This software is licensed under the terms and conditions of the MIT License
# accompanying the software ("License").  This software is distributed "AS IS"
# as set forth in the License.
from setuptools import setup


readme = open('README.rst').read()

doc = [
    'sphinx',
]
install_requires = [
    "requests",
    "jsonpointer",
    "jsonpath-ng",
]
test = [
    'pytest',
    'mock',
    'requests_mock',
    'uritemplate',
]

setup(
    name='linkwalker',
    version='0.1.0',
    description=("linkwalker - Traverse hypermedia APIs by following "
                 "link relations"),
    long_description=readme,
    author="Riverbed Technology",
    author_email="eng-github@riverbed.com",
    packages=[
        'linkwalker',
    ],
    package_dir={'linkwalker': 'linkwalker'},
    scripts=[
    ],
    include_package_data=True,

    install_requires=install_requires,
    extras_require={
        'test': test,
        'doc': doc,
        'dev': test + doc,
        'all': [],
    },
    keywords='linkwalker hypermedia hal uritemplate',
    license='MIT',
    platforms='Linux, Mac OS, Windows',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
    ],
    python_requires='>=3.6',
)
