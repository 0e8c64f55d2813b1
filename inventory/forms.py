from django import forms

from .models import Box, Item


class BoxForm(forms.ModelForm):
    """Validates box payloads for the JSON API. The box number is never accepted from clients."""

    class Meta:
        model = Box
        fields = [
            'current_room',
            'target_room',
            'description',
            'is_fragile',
            'no_stack',
            'is_moved_to_target',
            'label_printed',
        ]
        widgets = {
            'description': forms.Textarea(attrs={'rows': 3}),
        }

    def submitted_fields(self) -> dict:
        """Cleaned values for the fields actually present in the submitted data."""
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data
        }


class ItemForm(forms.ModelForm):
    """Validates item payloads. The owning box is chosen by UUID, not by this form."""

    class Meta:
        model = Item
        fields = ['name', 'description']

    def __init__(self, *args, partial=False, **kwargs):
        super().__init__(*args, **kwargs)
        if partial:
            self.fields['name'].required = False

    def submitted_fields(self) -> dict:
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if name in self.data
        }
