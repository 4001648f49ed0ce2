from django import template

from apps.theme.renderer import ThemeRenderer

register = template.Library()


def _renderer(context):
    renderer = context.get("theme")
    if renderer is None:
        renderer = ThemeRenderer()
    return renderer


@register.simple_tag(takes_context=True)
def theme_pix(context, pixstring):
    """{% theme_pix "i/star" %} → 테마 아이콘"""
    return _renderer(context).render_custom_pix(pixstring)


@register.simple_tag(takes_context=True)
def theme_contactus(context):
    return _renderer(context).render_contactus()
