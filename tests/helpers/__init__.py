"""Test helpers: builders for template sources, projects and starter packs."""
