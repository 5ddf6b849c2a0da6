"""Editor session: state container, compile controller and renderer."""
