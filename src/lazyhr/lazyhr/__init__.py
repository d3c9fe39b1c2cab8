"""LazyHR core package.

Organized by feature modules (leave, attendance, users) with a thin Flask
controller layer on top of service/repository layers.
"""
