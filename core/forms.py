"""
Forms for The Dividend core application.
Handles reader profile editing.
"""
from django import forms
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

INPUT_CLASSES = 'w-full px-4 py-3 border border-border rounded-lg focus:outline-none focus:ring-2 focus:ring-accent'


class ProfileForm(forms.ModelForm):
    """
    Form for editing the public profile: display name, bio and avatar.
    The avatar is a hosted image URL.
    """

    class Meta:
        model = get_user_model()
        fields = ['name', 'bio', 'avatar_url']
        widgets = {
            'name': forms.TextInput(attrs={
                'class': INPUT_CLASSES,
                'placeholder': 'Your name',
            }),
            'bio': forms.Textarea(attrs={
                'class': INPUT_CLASSES,
                'placeholder': 'Tell readers about yourself',
                'rows': 4,
                'maxlength': 500,
            }),
            'avatar_url': forms.URLInput(attrs={
                'class': INPUT_CLASSES,
                'placeholder': 'https://',
            }),
        }
        labels = {
            'avatar_url': _('Avatar image URL'),
        }

    def clean_name(self):
        return self.cleaned_data.get('name', '').strip()

    def clean_bio(self):
        return self.cleaned_data.get('bio', '').strip()
