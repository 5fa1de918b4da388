"""Command center: workspace-scoped tasks, projects and meetings."""
