from setuptools import setup

setup(
	name='idleblank',
	version='0.1.0',
	description='Turns the HDMI display off when nobody is using it',
	packages=['idleblank'],
	package_dir={'':'src'},
	python_requires='>=3.8',
	install_requires=[
		'inotify_simple',
	],
	extras_require={
		'logind': ['dbus-python'],
		'test': ['pytest'],
	},
	entry_points={
		'console_scripts': [
			'idleblank=idleblank:main',
		]
	}
)
