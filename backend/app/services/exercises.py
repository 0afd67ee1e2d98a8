from __future__ import annotations

from app.models.exercise import Exercise

LS_LA_OUTPUT = """total 24
drwxr-xr-x  4 user user 4096 Dec 13 10:30 .
drwxr-xr-x 10 user user 4096 Dec 13 10:00 ..
-rw-r--r--  1 user user  220 Dec 13 10:00 .bashrc
-rw-r--r--  1 user user  807 Dec 13 10:00 .profile
drwxr-xr-x  2 user user 4096 Dec 13 10:30 documents
drwxr-xr-x  2 user user 4096 Dec 13 10:30 projet"""


STANDARD_EXERCISES: tuple[Exercise, ...] = (
    Exercise(
        id="linux-1",
        title="Commandes Linux de Base",
        description="Testez vos connaissances des commandes Linux essentielles.",
        type="terminal",
        task="Listez tous les fichiers (y compris les fichiers cachés) dans le répertoire courant avec les détails.",
        validation="ls -la",
        points=10,
        output=LS_LA_OUTPUT,
        hint="Utilisez ls avec les options -l et -a",
    ),
    Exercise(
        id="linux-2",
        title="Gestion des Fichiers",
        description="Créez et gérez des fichiers et répertoires.",
        type="terminal",
        task='Créez un répertoire nommé "projet" et naviguez dedans.',
        validation="mkdir projet",
        points=10,
        output='Répertoire "projet" créé avec succès',
        hint="Utilisez mkdir pour créer un répertoire",
    ),
    Exercise(
        id="linux-3",
        title="Permissions Linux",
        description="Gérez les permissions de fichiers.",
        type="terminal",
        task="Changez les permissions d'un fichier pour qu'il soit exécutable par tous.",
        validation="chmod +x",
        points=15,
        output="Permissions modifiées avec succès",
        hint="Utilisez chmod avec +x pour rendre exécutable",
    ),
    Exercise(
        id="code-1",
        title="Script Bash Simple",
        description="Écrivez un script Bash basique.",
        type="code",
        task='Écrivez un script qui affiche "Hello BTS CIEL" et la date actuelle.\nUtilisez echo et date.',
        validation="echo.*date",
        points=15,
        pattern=r"echo.*hello.*bts.*ciel.*date",
        failure_message='Votre script doit contenir echo "Hello BTS CIEL" et la commande date',
    ),
    Exercise(
        id="code-2",
        title="Fonction Python",
        description="Créez une fonction Python simple.",
        type="code",
        task=(
            'Écrivez une fonction Python nommée "calculate_average" qui prend une liste de nombres '
            "et retourne leur moyenne."
        ),
        validation="def calculate_average",
        points=20,
        pattern=r"def\s+calculate_average.*sum.*len",
        failure_message="Votre fonction doit calculer la somme et diviser par la longueur de la liste",
    ),
)


def standard_exercises() -> list[Exercise]:
    return [ex.model_copy(deep=True) for ex in STANDARD_EXERCISES]
