"""Session launcher, configuration checker and shared configuration tooling for the LeftWM window manager."""

__version__ = "0.5.0"