"""fibersnap lives at <https://github.com/fibersnap/fibersnap>.

fibersnap
---------

Immutable snapshot trees of live component trees, with a record of the state
holders needed to replay them.

"""
from setuptools import setup

about = {}
with open("src/fibersnap/__about__.py") as fp:
    exec(fp.read(), about)

with open('requirements/test.txt') as f:
    tests_reqs = [line for line in f.read().split('\n') if line]

with open('README.md', encoding='utf-8') as f:
    readme = f.read()

with open('CHANGES', encoding='utf-8') as f:
    history = f.read().replace('.. :changelog:', '')


setup(
    name=about['__title__'],
    version=about['__version__'],
    url=about['__github__'],
    download_url=about['__pypi__'],
    project_urls={
        'Documentation': about['__docs__'],
        'Code': about['__github__'],
        'Issue tracker': about['__tracker__'],
        'Changes': about['__changes__'],
    },
    license=about['__license__'],
    author=about['__author__'],
    author_email=about['__email__'],
    description=about['__description__'],
    long_description=readme,
    long_description_content_type="text/markdown",
    package_dir={'': 'src'},
    packages=['fibersnap', 'fibersnap._internal'],
    include_package_data=True,
    python_requires='>=3.9',
    install_requires=['typing-extensions>=4.1'],
    tests_require=tests_reqs,
    extras_require={'test': tests_reqs},
    zip_safe=False,
    keywords=about['__title__'],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: Implementation :: PyPy",
        "Topic :: Software Development :: Debuggers",
        "Topic :: Utilities",
    ],
)
