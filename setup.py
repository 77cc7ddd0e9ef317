from setuptools import setup, find_packages

setup(
    name='reliefmesh',
    version='0.1.0',
    description='Geographic polygon to triangle mesh pipeline',
    packages=find_packages(include=['reliefmesh', 'reliefmesh.*']),
    python_requires='>=3.9',
    install_requires=[
        'numpy',
        'numba',
    ],
    extras_require={
        'tests': ['pytest'],
    },
)
