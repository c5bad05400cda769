"""Markdown rendering of recipes and sessions for terminal output."""

from chefinbox.models.models import Recipe, SessionSnapshot


def format_recipe_markdown(recipe: Recipe) -> str:
    """Render one recipe as a markdown section (detail view)."""
    facts = [
        f"**Difficulty:** {recipe.difficulty.value}",
        f"**Prep time:** {recipe.prep_time}",
        f"**Serves:** {recipe.servings}",
    ]
    if recipe.calories:
        facts.append(f"**Calories:** {recipe.calories}")

    lines = [f"## {recipe.title}", "", recipe.description, "", " · ".join(facts), "", "### Ingredients"]
    lines.extend(f"- {item}" for item in recipe.ingredients)
    lines.extend(["", "### Method"])
    lines.extend(f"{idx}. {step}" for idx, step in enumerate(recipe.instructions, start=1))
    if recipe.image_url:
        lines.extend(["", f"[Picture]({recipe.image_url})"])
    return "\n".join(lines)


def format_session_markdown(snapshot: SessionSnapshot) -> str:
    """Render the ingredient set, any error and the current recipe batch."""
    names = ", ".join(item.name for item in snapshot.ingredients) or "_none_"
    lines = [f"**Ingredients:** {names}", f"**Cooking for:** {snapshot.servings}", ""]

    if snapshot.error:
        lines.extend([f"> ⚠️ {snapshot.error}", ""])

    if snapshot.recipes:
        lines.append(
            f"# Your recipes\nWe found {len(snapshot.recipes)} dishes tailored for {snapshot.servings} people."
        )
        for recipe in snapshot.recipes:
            lines.extend(["", format_recipe_markdown(recipe)])
    elif snapshot.ingredients and not snapshot.error:
        lines.append("_Ready to start: choose the servings and ask for recipes._")

    return "\n".join(lines)
