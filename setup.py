import setuptools

with open('README.md', 'rt') as f:
    long_description = f.read()

setuptools.setup(
    name='decfp',
    version='0.0.0',
    author='Bill Zorn',
    author_email='billzorn@cs.washington.edu',
    description='exact IEEE 754-2008 decimal128 arithmetic on digit sequences and rationals',
    long_description=long_description,
    license='MIT',
    install_requires=['gmpy2>=2.1.2'],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    packages=['decfp', 'decfp.engine', 'decfp.arithmetic'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
