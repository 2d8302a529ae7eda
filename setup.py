from setuptools import setup, find_packages

setup(name='stepwise',
      version='0.1.0',
      description='Step-driven computations which can be suspended, cancelled, and interleaved on one thread',
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: MIT License",
      ],
      keywords='cooperative cancellation suspend resume generator scheduling',
      license='MIT',
      python_requires='>=3.11',
      packages=find_packages(include=['stepwise', 'stepwise.*']),
      install_requires=[
          'trio',
          'outcome>=1.3',
      ],
      extras_require={
          'test': ['pytest'],
      },
)
