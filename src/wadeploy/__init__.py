"""wadeploy - deploy the PowerStrux WA configuration file to local or remote hosts."""

__version__ = "0.1.0"
