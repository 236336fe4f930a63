"""Demo script showing how to load a buildgate configuration and run its audit."""

import os
from pathlib import Path

from buildgate.audit import AuditScanner, rules_from_config
from buildgate.checkers import is_ci
from buildgate.config import default_config, load_config


def demo_basic_loading():
    """Load the example configuration and describe its steps."""
    print("🔧 Basic Configuration Loading")
    print("=" * 50)

    yaml_file = Path(__file__).parent / "buildgate.yaml"
    config = load_config(yaml_file)

    print(f"✅ Title: {config.title}")
    print(f"📋 Stages: {config.total_stages}")
    for ordinal, step in enumerate(config.steps, 1):
        marker = "required" if step.required else "optional"
        print(f"   {ordinal}. {step.name} [{step.kind.value}, {marker}]")
    print()


def demo_harness_settings():
    """Show how the browser harness settings change under CI."""
    print("🌐 Browser Harness Settings")
    print("=" * 50)

    config = load_config(Path(__file__).parent / "buildgate.yaml")
    harness = next(s.harness for s in config.steps if s.harness is not None)

    for label, ci in (("local", False), ("CI", True)):
        settings = harness.resolve(ci)
        print(
            f"{label:>5}: workers={settings.workers} retries={settings.retries} "
            f"fully_parallel={settings.fully_parallel}"
        )
    print(f"Current context is CI: {is_ci(os.environ)}")
    print()


def demo_audit_scan():
    """Run the default audit rules over this directory."""
    print("🔍 Audit Scan")
    print("=" * 50)

    config = default_config()
    scanner = AuditScanner(relative_to=Path(__file__).parent)
    findings = scanner.scan(
        Path(__file__).parent, rules_from_config(config.audit.rules)
    )
    for finding in findings:
        print(f"⚠️  {finding.rule_id}: {finding.location}")
    print(f"{len(findings)} finding(s)")


if __name__ == "__main__":
    demo_basic_loading()
    demo_harness_settings()
    demo_audit_scan()
