"""Event subscribers registered by rumkit.emitter.configure()."""
