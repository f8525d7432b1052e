from setuptools import setup, find_packages

setup(
    name="art-shelf",
    version="0.1",
    packages=find_packages(exclude=['tests', 'tests.*', 'scripts']),
    install_requires=[
        'fastapi',
        'uvicorn',
        'sqlalchemy>=2.0',
        'pydantic>=2',
        'pydantic-settings',
        'pandas',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
)
