"""Core logic: source resolution, trait extraction, classification, persistence and toolchain selection."""
