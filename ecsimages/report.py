def format_report(image_services):
    lines = ["", "Unique container image URIs and services using them:"]
    for image in sorted(image_services):
        services = image_services[image]
        lines.append(image)
        if services:
            lines.append("  Services:")
            lines.extend(f"    - {name}" for name in sorted(services))
        else:
            lines.append("  No active services using this image")
        lines.append("")
    return "\n".join(lines)


def format_failures(failures):
    """Summary line for per-item requests that were skipped, or an empty string."""
    if not failures:
        return ""
    return f"Warning: {len(failures)} request(s) failed; the report may be incomplete."
