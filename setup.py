from setuptools import setup, find_packages


setup(
    name='pystack',
    version='0.1.0',
    description='mountable middleware stacks for python web services',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    author='Joe Cross',
    author_email='joe.mcross@gmail.com',
    packages=find_packages(exclude=('tests', 'tests.*', 'examples', 'examples.*')),
    install_requires=['ujson'],
    extras_require={
        'test': ['pytest', 'invoke', 'tox']
    },
    license='MIT',
    platforms='any',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP :: WSGI',
        'Topic :: Internet :: WWW/HTTP :: WSGI :: Application',
        'Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware',
        'Topic :: Software Development :: Libraries :: Application Frameworks',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    keywords='wsgi web middleware stack connect'
)
