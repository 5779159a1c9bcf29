"""
_protein_data.py
================
Empirical amino-acid substitution models stored as eigen-decompositions.

Each model is given by the eigenvalues D and the orthonormal eigenvectors V
of the symmetrised rate matrix, V'DV = Pi^(1/2) Q Pi^(-1/2), together with
the stationary frequencies Pi.  States are ordered as in ``AMINO_ACIDS``.

Sources
-------
JTT     : Kosiol and Goldman, "The different versions of the Dayhoff rate matrix".
pmb     : Veerassamy, Smith and Tillier (2003), PMB matrix.
cpREV45 : PAML 3.13d ``.dat`` distribution.
"""

import numpy as np


AMINO_ACIDS = "arndcqeghilkmfpstwyv"


JTT_EIGENVALUES = np.array([
    -1.8796581e+00, -1.8172172e+00, -1.6140312e+00, -1.5389657e+00, -1.4048698e+00,
    -1.3099505e+00, -1.2466845e+00, -1.1717975e+00, -1.0603172e+00, -9.9900609e-01,
    -8.6014395e-01, -7.6866978e-01, -7.0249779e-01, -6.5119696e-01, -6.0593575e-01,
    -5.4569403e-01, -4.5576764e-01, -3.4602835e-01, -3.1033314e-01, 2.4229737e-16,
])

JTT_EIGENVECTORS = np.array([
    [
        3.4194258e-01, 1.6035947e-01, 2.4975080e-01, -5.2798921e-01, -2.0048493e-01,
        -2.0948435e-01, -9.2506410e-02, -4.0984135e-01, 5.1265454e-02, 1.3698171e-01,
        -2.1693449e-01, 1.4862304e-01, 7.3855796e-02, -1.7669582e-01, -1.1321114e-01,
        1.2678791e-01, 1.2904797e-01, -3.9680666e-02, 6.6388018e-02, 2.7723983e-01,
    ],
    [
        3.6579492e-03, 6.8921483e-02, 8.0380333e-02, 8.9808102e-02, 3.9544099e-01,
        -6.4854001e-01, -1.3102336e-01, 9.2068706e-02, -9.1825634e-02, -5.6660489e-02,
        -3.1495998e-02, -2.7759762e-03, -3.0686106e-01, -6.4654436e-02, 4.0063127e-01,
        -1.0226885e-01, -9.4674855e-02, -1.8811888e-01, 2.7003260e-02, 2.2595785e-01,
    ],
    [
        7.4175511e-02, 4.5159040e-01, 3.9289087e-01, 1.2679059e-01, 2.3607799e-01,
        3.2603277e-01, 2.5390431e-03, 4.2676497e-01, 4.8792446e-02, 4.1764478e-01,
        -1.1754121e-01, 8.1870024e-02, 1.0186346e-01, 2.4663190e-02, -4.2382010e-02,
        -2.3004026e-02, -5.5162332e-02, -1.2383751e-01, 6.6325772e-02, 2.0626671e-01,
    ],
    [
        -2.8260731e-02, -1.9482558e-01, -3.9684996e-01, -4.5540174e-01, 2.1450091e-01,
        -9.5353703e-02, -4.3690554e-02, 2.8845169e-01, -1.4662611e-01, 7.8659694e-02,
        1.4334156e-03, -7.4450736e-02, 3.0216862e-01, 3.4141483e-01, -2.6766239e-01,
        -1.2311817e-01, -8.6338969e-02, -2.4173978e-01, 1.0527706e-01, 2.2642648e-01,
    ],
    [
        1.1278018e-02, 3.5896318e-02, -1.9638345e-02, -1.2879662e-02, -1.7824992e-02,
        2.3811352e-02, 3.0922235e-03, 1.1700952e-02, 3.7713517e-04, -4.7352423e-02,
        2.2556853e-02, -1.4765656e-01, 6.0458634e-02, 2.9861614e-01, 2.4058800e-01,
        8.4536251e-01, -2.8287357e-01, 5.0975183e-02, -6.4851732e-02, 1.4240428e-01,
    ],
    [
        1.7715139e-03, -9.3010913e-03, -5.3482707e-02, -1.2777313e-01, 3.7760940e-01,
        3.3701137e-01, 1.1251355e-01, -3.3785230e-01, 6.0532637e-01, -2.0769837e-01,
        1.6078029e-01, -6.3946781e-02, 4.3756527e-02, 2.3896694e-02, 2.3848083e-01,
        -1.5685676e-01, -8.7719226e-02, -1.4823315e-01, 5.9710471e-02, 2.0263504e-01,
    ],
    [
        8.0100235e-03, 8.7527473e-02, 2.5940055e-01, 4.4537578e-01, -2.5508947e-01,
        -1.4159749e-01, 1.4630274e-02, -2.8182909e-01, -9.7325058e-02, -2.4096746e-01,
        4.3147243e-02, -1.4244919e-01, 2.8898404e-01, 3.9663756e-01, -1.9046405e-01,
        -1.7877981e-01, -8.4736944e-02, -2.8360805e-01, 1.1690905e-01, 2.4863616e-01,
    ],
    [
        -8.0664120e-03, 4.8666276e-02, -6.5651648e-02, 3.1045189e-02, -2.8439951e-02,
        1.0119518e-01, 3.9743824e-02, 6.2674009e-02, 1.6139722e-02, -1.3101069e-01,
        2.5214258e-01, -1.4517371e-01, -6.1109800e-01, -1.8912436e-01, -5.3064761e-01,
        1.9517788e-01, 1.7019234e-02, -2.5387675e-01, 7.2890673e-02, 2.7333848e-01,
    ],
    [
        -7.4272898e-03, -6.6231071e-02, -6.8390818e-02, 6.9965944e-03, -5.6531517e-01,
        -2.2992146e-01, -8.1115998e-02, 3.8921722e-01, 5.4743028e-01, 1.0090964e-01,
        2.1942661e-01, 1.3674837e-01, 4.1942290e-02, -6.0541627e-02, 1.1273706e-01,
        -8.5117010e-02, -1.8633099e-01, -1.8857490e-02, 1.3015950e-02, 1.5160138e-01,
    ],
    [
        6.4725511e-01, -1.1809954e-01, -1.8682388e-01, 2.4120128e-01, 8.4744703e-02,
        1.0628264e-01, -1.1486555e-01, 1.9614357e-01, 1.4097241e-02, -3.0033176e-01,
        -6.7989482e-02, 3.0234938e-01, -3.5393181e-02, 1.6046219e-01, 1.2159877e-02,
        1.6401891e-02, 2.8868113e-01, 2.3265517e-01, 7.6460920e-04, 2.2927919e-01,
    ],
    [
        -1.1406420e-02, 2.6007941e-02, -2.1019804e-02, -1.0444725e-03, -1.9861624e-02,
        1.3171592e-02, -2.0815146e-01, -1.3988868e-01, -9.7865210e-02, 3.8824763e-01,
        4.5699643e-01, -3.8749248e-01, -6.1197345e-02, 1.6559914e-01, 1.1641117e-01,
        -1.3240652e-01, 2.7954015e-01, 4.2535728e-01, -5.9523696e-02, 3.0184584e-01,
    ],
    [
        -5.0823869e-03, -9.1784673e-02, -9.5897547e-02, -1.2807307e-01, -3.7543173e-01,
        4.1388165e-01, 3.0112340e-02, -5.2905623e-03, -3.7769580e-01, 5.8835343e-04,
        -1.7598338e-01, 1.3222074e-02, -2.7471763e-01, 3.1538074e-02, 4.7926376e-01,
        -1.9586868e-01, -1.0384984e-01, -2.4120289e-01, 7.7364202e-02, 2.4392200e-01,
    ],
    [
        -2.8716174e-02, -1.6826612e-02, 1.1427985e-01, -1.0025069e-01, -2.5993349e-02,
        -1.6056559e-01, 9.0604253e-01, 1.0131797e-01, -4.6964499e-02, -4.8581864e-03,
        8.9909237e-02, 8.3684758e-02, -3.8990145e-02, 1.1799009e-01, 5.4652195e-02,
        -1.5272207e-02, 1.8340170e-01, 1.5843434e-01, -4.1391778e-03, 1.5301626e-01,
    ],
    [
        1.6131897e-03, 2.5348211e-02, -8.0398737e-03, -1.4341177e-02, -2.1860360e-02,
        -1.8963139e-02, 4.9368402e-02, 7.7145641e-02, 1.3445887e-01, -1.4372110e-01,
        -5.5260837e-01, -4.3302429e-01, -1.1515127e-01, -2.4773113e-02, -1.6247612e-01,
        -1.9460071e-01, -3.4625414e-01, 4.5372965e-01, -1.1748816e-01, 2.0132054e-01,
    ],
    [
        -4.6387224e-03, 7.6833234e-02, -2.7691451e-02, 1.2135066e-02, -1.0365238e-02,
        4.0315189e-02, 2.9151729e-02, 1.9410895e-01, -1.9899147e-01, -3.3213330e-01,
        1.5614660e-01, -2.8013419e-01, 4.6945515e-01, -6.2939465e-01, 1.1511635e-01,
        7.8098445e-02, 1.0357833e-01, -1.0054271e-02, 5.3802638e-02, 2.2479313e-01,
    ],
    [
        -9.9408222e-02, -7.6854185e-01, 2.2412505e-01, 2.4123060e-01, 1.1408820e-01,
        3.9933508e-02, 9.3872968e-03, -6.1258600e-02, 4.8789236e-02, 3.1324829e-01,
        -1.7349418e-01, 4.9406600e-02, 7.5812496e-02, -1.9794374e-01, -6.2741249e-02,
        1.2975106e-01, 2.6531145e-02, -4.9006397e-02, 5.0080043e-02, 2.6119903e-01,
    ],
    [
        -2.3339006e-01, 2.9913717e-01, -6.2353780e-01, 3.2742178e-01, -1.9730107e-02,
        -6.8258168e-02, 1.0052038e-01, -2.3923994e-01, 5.7703643e-02, 2.7207141e-01,
        -2.5507566e-01, 1.9404002e-01, 8.2833934e-02, -1.3355310e-01, -2.0070063e-02,
        9.0150161e-02, 1.1373855e-01, -8.5979295e-03, 5.3191422e-02, 2.4190482e-01,
    ],
    [
        1.8641340e-03, 1.0598757e-03, -2.5668667e-03, -3.4522751e-03, -1.2027744e-02,
        1.7573826e-02, 5.7255971e-03, 6.9036731e-04, 5.9748822e-03, 1.5197360e-03,
        -1.5202475e-02, 1.4837477e-02, 4.9559602e-02, -2.7467510e-03, -2.5513216e-02,
        -3.9538148e-02, 9.5940227e-02, -2.4700749e-01, -9.5381851e-01, 1.1973298e-01,
    ],
    [
        -1.2681719e-03, 1.2016593e-02, 7.9975595e-03, -6.4822637e-04, 9.9878092e-02,
        4.8545631e-02, 6.7538223e-03, -1.5968450e-01, -2.6526649e-01, -9.3163992e-03,
        3.3271473e-01, 4.6780169e-01, 5.3713344e-02, -1.3150362e-01, -1.2773317e-01,
        -1.0930500e-01, -6.1928309e-01, 2.9435149e-01, -1.0499018e-01, 1.7973026e-01,
    ],
    [
        -6.2621454e-01, 4.1112057e-02, 2.0555685e-01, -1.5309002e-01, -3.1076013e-03,
        5.8064703e-02, -2.4376009e-01, 1.0315871e-01, 2.8323951e-02, -3.4993469e-01,
        -9.9049436e-02, 3.2529845e-01, -2.8843879e-02, 1.4754992e-01, -2.3945970e-02,
        4.8938251e-02, 3.0183990e-01, 2.1215219e-01, 9.2511183e-03, 2.5763139e-01,
    ],
])

JTT_FREQUENCIES = np.array([
    0.076862, 0.051057, 0.042546, 0.051269, 0.020279,
    0.041061, 0.061820, 0.074714, 0.022983, 0.052569,
    0.091111, 0.059498, 0.023414, 0.040530, 0.050532,
    0.068225, 0.058518, 0.014336, 0.032303, 0.066374,
])

PMB_EIGENVALUES = np.array([
    -1.84106, -1.55982, -1.51951, -1.39397, -1.30463,
    -1.27098, -1.20803, -1.18627, -1.12421, -1.09012,
    -0.932845, -0.835565, -0.81895, -0.751751, -0.662356,
    -0.632406, -0.600843, -0.521218, -0.476422, -2.89074e-16,
])

PMB_EIGENVECTORS = np.array([
    [
        0.115932, 0.0640013, -0.259257, 0.0215157, -0.0196316,
        -0.4948, -0.227569, 0.444317, -0.0646669, 0.211457,
        0.514948, -0.06096, -0.0399752, -0.0366116, -0.0218354,
        0.0959844, 0.0989926, -0.0467125, 0.0491595, -0.27488,
    ],
    [
        -0.00104876, 0.00134451, -0.00778269, 0.0525286, -0.405472,
        0.15119, -0.000647471, 0.345029, 0.0964271, -0.185238,
        -0.135342, 0.544836, -0.398871, -0.0569576, 0.13368,
        -0.0283127, -0.255691, 0.020274, 0.177548, -0.231871,
    ],
    [
        0.00467861, 0.00758568, -0.122108, 0.144041, -0.382765,
        -0.460067, 0.0514093, -0.551106, 0.0276805, -0.453355,
        0.0588524, -0.10247, 0.075511, -0.010321, 0.0789678,
        -0.0283354, -0.0800478, -0.0232555, 0.14829, -0.194124,
    ],
    [
        -0.000903147, 0.00168207, -0.0139608, -0.086994, 0.183972,
        0.0473424, -0.0547358, 0.413689, 0.169039, -0.372539,
        -0.265706, -0.330834, 0.469874, -0.223796, 0.124156,
        -0.00899351, -0.212927, -0.0144898, 0.240829, -0.211407,
    ],
    [
        0.0105084, 0.00106299, -0.00193764, -0.00158228, 0.0025229,
        0.00678825, -0.00663193, -0.012004, -0.00394139, 0.0104573,
        -0.0965678, 0.0191213, 0.00639636, -0.0052054, -0.0307427,
        -0.0638003, -0.11751, -0.903026, -0.356362, -0.168769,
    ],
    [
        0.0208431, 0.160763, 0.0691058, -0.88869, -0.00723522,
        -0.095389, -0.0150183, -0.203435, -0.0936731, 0.179089,
        -0.0350438, 0.0701475, -0.0285719, -0.0577102, 0.0780169,
        -0.00445626, -0.148494, 0.0148227, 0.12247, -0.1841,
    ],
    [
        0.00230301, -0.0321236, -0.0228964, 0.302715, -0.262444,
        0.108923, 0.0670404, -0.145462, -0.172298, 0.669595,
        -0.168587, -0.0995758, 0.252066, -0.202558, 0.124472,
        0.0162268, -0.245305, 0.0099649, 0.223508, -0.23124,
    ],
    [
        -0.000244605, 0.00348596, -0.0187142, -0.00734966, 0.0184706,
        0.0691544, 0.0330963, -0.0216272, 0.0280843, 0.0367487,
        -0.232182, 0.0622428, -0.0196427, 0.0697489, 0.0269341,
        -0.171697, 0.790494, -0.173005, 0.405797, -0.279349,
    ],
    [
        -0.0017523, -0.00866399, 0.00533232, 0.0270058, 0.0437556,
        0.0285742, 0.0262952, 0.0800109, -0.0542967, 0.0504868,
        -0.0817122, -0.437371, -0.310111, 0.71802, 0.153414,
        -0.24255, -0.226523, 0.0279714, 0.0982332, -0.17332,
    ],
    [
        0.746808, -0.0601759, 0.156431, 0.00360401, -0.0169165,
        -0.0128139, 0.250201, -0.0206333, 0.278633, 0.0404642,
        -0.121539, -0.107799, -0.0969254, -0.0380616, 0.071631,
        0.237476, 0.0982482, 0.143233, -0.287444, -0.244681,
    ],
    [
        -0.119003, 0.312851, 0.00874017, 0.100367, 0.0139279,
        0.0805352, -0.572684, -0.0876563, -0.287471, -0.0954742,
        -0.294887, -0.049064, -0.0737728, -0.0176543, 0.0800233,
        0.231127, 0.118508, 0.204526, -0.370292, -0.309504,
    ],
    [
        0.00230461, -0.0332841, 0.00161532, 0.218701, 0.757484,
        -0.215874, 0.0524135, -0.218454, -0.00332572, 0.0205372,
        -0.0562324, 0.313139, -0.184193, -0.0870854, 0.0933974,
        0.00126996, -0.213837, 0.0130508, 0.174417, -0.228028,
    ],
    [
        -0.0992252, -0.919578, -0.140704, -0.148719, -0.00796292,
        0.0203168, -0.178488, -0.0337994, -0.114838, -0.0206721,
        -0.0506002, -0.00819778, -0.0264817, -0.0135593, 0.0385665,
        0.0830983, 0.0388851, 0.0698663, -0.123766, -0.148013,
    ],
    [
        -0.00358129, 0.0232645, -0.000360659, -0.00540773, 0.00796336,
        -0.0862367, 0.493189, 0.175679, -0.565795, -0.130986,
        -0.0155728, 0.239252, 0.320375, 0.149152, -0.0453768,
        -0.210566, 0.0487057, 0.162454, -0.279293, -0.212134,
    ],
    [
        0.00202433, -0.00584665, -0.0114656, -0.00218578, -0.0165789,
        0.0188677, 0.00900348, -0.0141102, 0.0156772, -0.0116486,
        -0.136127, -0.00463721, -0.00234507, 0.141875, -0.905541,
        0.230064, -0.128422, 0.0171344, 0.167623, -0.20501,
    ],
    [
        -0.071517, -0.0827703, 0.766908, 0.0670015, -0.0112641,
        0.206193, -0.0682038, -0.0441161, -0.1141, -0.117674,
        0.475133, -0.0673888, 0.0201927, -0.0494487, 0.00446861,
        0.0410966, 0.00781021, -0.053529, 0.115319, -0.261174,
    ],
    [
        0.0653325, 0.10286, -0.528188, -0.0317411, 0.0926005,
        0.613657, 0.122827, -0.186486, -0.0321009, -0.143964,
        0.418172, -0.0696682, -0.0183589, -0.049169, 0.0354186,
        0.0835744, -0.0218869, -0.0093409, 0.0264038, -0.237514,
    ],
    [
        0.000444023, -0.000969535, -0.00372855, 0.00843679, 0.00123938,
        0.00207416, -0.021005, -0.00995168, 0.0371437, 0.0153002,
        -0.00259829, -0.244264, -0.301267, -0.472498, -0.250363,
        -0.699123, -0.00893358, 0.151229, -0.18422, -0.125399,
    ],
    [
        0.00820931, -0.000654046, -0.00144545, 0.00500267, -0.00760668,
        0.0550419, -0.286912, -0.109013, 0.489689, 0.12349,
        0.126601, 0.340219, 0.444329, 0.313297, -0.0396013,
        -0.354665, -0.0400334, 0.139954, -0.188921, -0.189668,
    ],
    [
        -0.628315, 0.0513941, 0.0176892, -0.0246592, -0.0153444,
        -0.0906735, 0.406245, 0.0487768, 0.407305, 0.115176,
        0.00286302, -0.12204, -0.104041, -0.0473807, 0.0623057,
        0.24334, 0.0939561, 0.103317, -0.254159, -0.267312,
    ],
])

PMB_FREQUENCIES = np.array([
    0.075559, 0.053764, 0.037684, 0.044693, 0.028483,
    0.033893, 0.053472, 0.078036, 0.03004, 0.059869,
    0.095793, 0.051997, 0.021908, 0.045001, 0.042029,
    0.068212, 0.056413, 0.015725, 0.035974, 0.071456,
])

CPREV45_EIGENVALUES = np.array([
    -2.07313, -2.01921, -1.79356, -1.61085, -1.51498,
    -1.23043, -1.16179, -1.07154, -1.05036, -0.914058,
    -0.868912, -0.794207, -0.732442, -0.652434, -0.535857,
    -0.4496, -0.434444, -0.32826, -0.193396, 4.65355e-16,
])

CPREV45_EIGENVECTORS = np.array([
    [
        0.00926197, -0.0858898, 0.234984, -0.140525, -0.00516884,
        0.414625, 0.242234, -0.303444, -0.0825719, 0.243761,
        0.0440661, 0.429081, -0.471696, 0.0491742, 0.044319,
        0.0986309, 0.148443, -0.0674635, -0.058245, -0.275681,
    ],
    [
        0.314113, 0.0233899, -0.0868766, -0.0889307, -0.159754,
        0.308579, -0.289067, 0.0610756, -0.00962733, 0.0156619,
        -0.010231, 0.388171, 0.517198, -0.136032, 0.279871,
        -0.0812884, -0.260263, -0.156837, -0.0301462, -0.248998,
    ],
    [
        0.323454, 0.0202933, 0.496122, 0.468855, 0.448981,
        -0.037528, -0.287229, 0.052549, 0.0600354, -0.00558696,
        -0.00212274, -0.164546, -0.1678, -0.0591295, 0.0740233,
        -0.0346475, -0.101229, -0.137477, -0.0394324, -0.202485,
    ],
    [
        -0.137907, -0.015387, -0.181536, -0.435007, 0.039194,
        0.34718, -0.281696, 0.0863562, 0.0904975, -0.0730559,
        0.0126784, -0.54598, -0.311125, -0.173393, 0.141311,
        -0.0399948, -0.119929, -0.19008, -0.0441665, -0.192354,
    ],
    [
        -0.0127385, -0.0138857, 0.0822211, -0.0638438, -0.0311655,
        -0.00666138, 0.235657, 0.524416, 0.777225, 0.0254009,
        -0.0428687, 0.180705, -0.0790362, -0.0253286, -0.0435949,
        -0.00384878, -0.010726, 0.0105514, -0.000760267, -0.0948683,
    ],
    [
        0.135395, 0.00796203, -0.0884272, -0.364369, 0.530189,
        -0.332327, 0.513981, -0.112121, -0.0730833, -0.00592183,
        0.0176291, -0.0317102, 0.158177, -0.090455, 0.184399,
        -0.0402172, -0.204112, -0.127775, -0.035051, -0.194936,
    ],
    [
        0.20904, 0.0155209, 0.0152838, 0.308193, -0.613956,
        -0.115887, 0.427951, -0.0458256, -0.054722, -0.0351013,
        0.0302829, -0.309136, -0.107592, -0.178231, 0.20024,
        -0.0357263, -0.139842, -0.170885, -0.0452786, -0.221359,
    ],
    [
        -0.00593296, -9.08047e-06, 0.0106317, -0.0405386, -0.0214489,
        -0.0468292, 0.00130112, 0.0248411, -0.0183098, -0.0558805,
        -0.0178123, -0.0713712, 0.244735, 0.0996009, -0.358079,
        -0.210104, 0.590524, -0.553235, -0.071412, -0.289828,
    ],
    [
        -0.0240122, -0.00161526, -0.0154755, -0.0116655, -0.0683411,
        0.0141232, 0.0029964, 0.029067, -0.0203108, 0.11239,
        0.190151, -0.0635635, -0.0220569, 0.739731, -0.268134,
        -0.174049, -0.505557, -0.0965324, -0.0172102, -0.158114,
    ],
    [
        0.0587795, -0.718178, -0.0601256, 0.0422842, 0.0359993,
        0.0365513, 0.0357057, 0.234158, -0.170374, -0.312189,
        -0.00990326, -0.0383795, 0.0264684, 0.18706, 0.151097,
        -0.0260157, 0.175067, 0.34145, -0.033606, -0.284605,
    ],
    [
        -0.00491, 0.0975697, 0.0549753, -0.0420806, -0.0587733,
        -0.0680386, -0.114158, -0.587213, 0.454472, -0.043753,
        0.186841, -0.173712, 0.209674, 0.0623235, 0.0267447,
        -0.0523063, 0.141101, 0.416855, -0.0143925, -0.317805,
    ],
    [
        -0.841604, -0.0574005, 0.207693, 0.213787, 0.0286835,
        -0.0505543, 0.00781147, 0.000424149, -0.0434393, -0.00201794,
        0.00171434, 0.0880365, 0.180087, -0.117575, 0.207781,
        -0.0375561, -0.167103, -0.127025, -0.0397996, -0.223607,
    ],
    [
        -0.00283674, 0.0564726, -0.00450512, 0.0149426, 0.0113404,
        0.055149, 0.0375462, 0.0954351, -0.0668545, 0.61708,
        -0.640016, -0.237107, 0.151933, 0.14253, 0.0956152,
        -0.0247363, 0.0998318, 0.215577, -0.0134989, -0.148324,
    ],
    [
        0.00039897, -0.00199633, 0.0199216, -0.0151659, 0.0151362,
        0.0304236, 0.0281818, 0.2426, -0.220298, 0.352916,
        0.423212, -0.0424739, 0.0578566, -0.4354, -0.45087,
        -0.173, -0.0679244, 0.31813, 0.040226, -0.225832,
    ],
    [
        0.0083352, -0.000937407, 0.0494451, -0.0304447, -0.0223646,
        0.0125311, -0.00372773, 0.0405704, -0.0282603, -0.0488369,
        -0.0145343, -0.100851, 0.176366, 0.00895563, -0.262102,
        0.908166, -0.0897544, -0.0526888, -0.0468433, -0.207364,
    ],
    [
        -0.0324104, 0.0341931, -0.760037, 0.420216, 0.186293,
        -0.0996091, -0.105349, -0.0582791, 0.097999, 0.126293,
        0.0227619, 0.168189, -0.231767, -0.0298028, 0.0078056,
        0.0794804, 0.0220747, -0.068667, -0.0433172, -0.248998,
    ],
    [
        0.021673, 0.0445898, 0.1124, -0.318348, -0.248813,
        -0.663764, -0.390001, 0.107339, -0.108214, 0.0967688,
        -0.0252913, 0.210124, -0.274962, 0.0172418, 0.12771,
        0.0437082, 0.0378354, 0.0124266, -0.043318, -0.232379,
    ],
    [
        -0.00291195, -6.62409e-07, 0.000919208, 0.000945432, 0.00237527,
        -0.00209583, 0.00108521, -0.00402225, -0.00782085, -0.00666719,
        -0.00417986, -0.00717067, -0.0168142, 0.0309127, 0.0484242,
        0.0345775, 0.0280737, -0.0714197, 0.985454, -0.134164,
    ],
    [
        -0.00613393, -0.00321973, 0.00291013, -0.0225191, -0.0342727,
        -0.00738294, -0.0013968, -0.178396, -0.00964543, -0.393507,
        -0.576817, 0.142909, -0.122516, -0.223915, -0.480974,
        -0.183906, -0.295177, 0.0969215, 0.021679, -0.176068,
    ],
    [
        -0.0371712, 0.675257, -0.00645671, 0.024599, 0.0544486,
        0.14631, 0.115147, 0.294636, -0.235384, -0.360543,
        0.0201206, 0.034296, -0.0508453, 0.181264, 0.142303,
        -0.0119855, 0.170308, 0.280145, -0.035494, -0.256905,
    ],
])

CPREV45_FREQUENCIES = np.array([
    0.076, 0.062, 0.041, 0.037, 0.009,
    0.038, 0.049, 0.084, 0.025, 0.081,
    0.101, 0.05, 0.022, 0.051, 0.043,
    0.062, 0.054, 0.018, 0.031, 0.066,
])
